"""pykoji - Async Python client SDK for the Koji application platform."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pykoji")
except PackageNotFoundError:
    __version__ = "0+local"
from pykoji._mqtt import MqttHostChannel
from pykoji.backend import Database, Secret
from pykoji.bridge import HostChannel, MessageBridge, Subscription
from pykoji.client import KojiFrontend
from pykoji.config import HostChannelProfile, KojiConfig, load_override_payload
from pykoji.exceptions import (
    KojiChannelError,
    KojiConfigError,
    KojiError,
    KojiReplyTimeoutError,
    KojiStateError,
    KojiTransportError,
)
from pykoji.models import (
    DatabaseHttpStatusCode,
    DatabaseRoute,
    HostEvent,
    PredicateOperator,
)
from pykoji.remix import RemixStore, deep_merge, get_path, push_values

__all__ = [
    "__version__",
    "Database",
    "DatabaseHttpStatusCode",
    "DatabaseRoute",
    "HostChannel",
    "HostChannelProfile",
    "HostEvent",
    "KojiChannelError",
    "KojiConfig",
    "KojiConfigError",
    "KojiError",
    "KojiFrontend",
    "KojiReplyTimeoutError",
    "KojiStateError",
    "KojiTransportError",
    "MessageBridge",
    "MqttHostChannel",
    "PredicateOperator",
    "RemixStore",
    "Secret",
    "Subscription",
    "deep_merge",
    "get_path",
    "load_override_payload",
    "push_values",
]
