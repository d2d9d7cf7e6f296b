"""Frontend context: host channel, message bridge and remix store."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from pykoji._constants import EVENT_READY
from pykoji._mqtt import MqttHostChannel
from pykoji.bridge import HostChannel, MessageBridge
from pykoji.config import KojiConfig
from pykoji.exceptions import KojiConfigError, KojiStateError
from pykoji.models.host import HostEvent
from pykoji.remix.store import RemixStore

_logger = logging.getLogger(__name__)


class KojiFrontend:
    """Async context for a Koji running inside a host frame.

    Usage::

        async with KojiFrontend(config) as koji:
            koji.configure({"colors": {"background": "#fff"}})
            koji.ready()
            await koji.remix.wait_until_ready()
            await koji.remix.set({"colors": {"text": "#000"}})

    Parameters
    ----------
    config
        Client configuration.
    channel
        Host channel to use. When omitted, an MQTT channel is built from
        ``config.channel``.
    """

    def __init__(self, config: KojiConfig | None = None, *, channel: HostChannel | None = None) -> None:
        self._config = config if config is not None else KojiConfig()
        self._injected_channel = channel
        self._channel: HostChannel | None = None
        self._bridge: MessageBridge | None = None
        self._remix: RemixStore | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> KojiFrontend:
        channel = self._injected_channel
        if channel is None:
            if not self._config.channel.is_configured:
                raise KojiConfigError("No host channel: pass channel= or configure KojiConfig.channel.host")
            channel = MqttHostChannel(self._config.channel, loop=asyncio.get_running_loop(), logger=_logger)

        bridge = MessageBridge(channel, reply_timeout=self._config.reply_timeout)
        remix = RemixStore(bridge)
        channel.start(bridge.dispatch)

        self._channel = channel
        self._bridge = bridge
        self._remix = remix
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._remix is not None:
            self._remix.close()
        if self._bridge is not None:
            self._bridge.close()
        if self._channel is not None:
            try:
                self._channel.stop()
            except Exception:
                _logger.debug("Host channel stop failed", exc_info=True)
        self._remix = None
        self._bridge = None
        self._channel = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def bridge(self) -> MessageBridge:
        if self._bridge is None:
            raise KojiStateError("KojiFrontend not started. Use 'async with KojiFrontend(...) as koji:'")
        return self._bridge

    @property
    def remix(self) -> RemixStore:
        if self._remix is None:
            raise KojiStateError("KojiFrontend not started. Use 'async with KojiFrontend(...) as koji:'")
        return self._remix

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def configure(self, remix_data: Mapping[str, Any] | None, overrides: Mapping[str, Any] | None = None) -> None:
        """Initialize remix data with the Koji's default values."""
        self.remix.init(remix_data, overrides)

    def ready(self) -> None:
        """Tell the host the Koji has loaded; the host replies with IsRemixing."""
        self.bridge.send_message(HostEvent(name=EVENT_READY))
