"""Client configuration for pykoji."""

from __future__ import annotations

import dataclasses
import json
import os
from typing import Any

from pykoji._constants import DATABASE_URL, REST_URL
from pykoji.exceptions import KojiConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_timeout(value: str | None) -> float | None:
    if value is None:
        return None
    stripped = value.strip()
    if not stripped or stripped.lower() in {"none", "off"}:
        return None
    timeout = float(stripped)
    return timeout if timeout > 0 else None


@dataclasses.dataclass(frozen=True)
class HostChannelProfile:
    """Connection details for the MQTT host channel.

    The host frame and this client exchange JSON messages over two topics:
    the client publishes on ``outbound_topic`` and listens on
    ``inbound_topic``.
    """

    host: str = ""
    port: int = 8883
    inbound_topic: str = "koji/host/events"
    outbound_topic: str = "koji/client/events"
    client_id: str = ""
    username: str | None = None
    password: str | None = None
    tls: bool = True
    keepalive: int = 60
    qos: int = 1

    @property
    def is_configured(self) -> bool:
        """Whether a broker host has been provided."""
        return bool(self.host.strip())


@dataclasses.dataclass(frozen=True)
class KojiConfig:
    """Client configuration.

    Parameters
    ----------
    project_id : str
        Koji project id, sent as ``X-Koji-Project-Id`` by backend helpers.
    project_token : str
        Koji project token, sent as ``X-Koji-Project-Token``.
    database_url : str
        Base URL of the database API.
    rest_url : str
        Base URL of the keystore/CDN REST API.
    reply_timeout : float or None
        Seconds to wait for a host reply before giving up. ``None`` waits
        indefinitely.
    channel : HostChannelProfile
        MQTT host channel settings used by :class:`pykoji.KojiFrontend`
        when no channel object is injected.
    """

    project_id: str = ""
    project_token: str = ""
    database_url: str = DATABASE_URL
    rest_url: str = REST_URL
    reply_timeout: float | None = None
    channel: HostChannelProfile = dataclasses.field(default_factory=HostChannelProfile)

    def require_project_credentials(self) -> tuple[str, str]:
        """Return ``(project_id, project_token)`` or raise if either is missing."""
        project_id = self.project_id.strip()
        project_token = self.project_token.strip()
        if not project_id or not project_token:
            raise KojiConfigError("project_id and project_token are required for backend requests")
        return project_id, project_token

    @classmethod
    def from_env(cls, **overrides: Any) -> KojiConfig:
        """Create configuration from environment variables.

        Reads ``KOJI_PROJECT_ID``, ``KOJI_PROJECT_TOKEN`` and optional
        ``KOJI_*`` variables. Explicit keyword arguments override
        environment values.
        """
        env = os.environ

        channel_kwargs: dict[str, Any] = {}
        _ENV_CHANNEL_MAP = {
            "KOJI_CHANNEL_HOST": "host",
            "KOJI_CHANNEL_INBOUND_TOPIC": "inbound_topic",
            "KOJI_CHANNEL_OUTBOUND_TOPIC": "outbound_topic",
            "KOJI_CHANNEL_CLIENT_ID": "client_id",
            "KOJI_CHANNEL_USERNAME": "username",
            "KOJI_CHANNEL_PASSWORD": "password",
        }
        for env_key, field_name in _ENV_CHANNEL_MAP.items():
            val = env.get(env_key)
            if val is not None:
                channel_kwargs[field_name] = val

        for env_key, field_name in (
            ("KOJI_CHANNEL_PORT", "port"),
            ("KOJI_CHANNEL_KEEPALIVE", "keepalive"),
            ("KOJI_CHANNEL_QOS", "qos"),
        ):
            val = env.get(env_key)
            if val is not None:
                channel_kwargs[field_name] = int(val)

        tls_env = env.get("KOJI_CHANNEL_TLS")
        if tls_env is not None:
            channel_kwargs["tls"] = _env_bool(tls_env, True)

        channel_overrides = overrides.pop("channel", None)
        if isinstance(channel_overrides, dict):
            channel_kwargs.update(channel_overrides)
        elif isinstance(channel_overrides, HostChannelProfile):
            channel_kwargs = dataclasses.asdict(channel_overrides)

        _ENV_CONFIG_MAP = {
            "KOJI_PROJECT_ID": "project_id",
            "KOJI_PROJECT_TOKEN": "project_token",
            "KOJI_DATABASE_URL": "database_url",
            "KOJI_REST_URL": "rest_url",
        }
        config_kwargs: dict[str, Any] = {"channel": HostChannelProfile(**channel_kwargs)}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        if "reply_timeout" not in overrides:
            config_kwargs["reply_timeout"] = _env_timeout(env.get("KOJI_REPLY_TIMEOUT"))

        config_kwargs.update(overrides)

        return cls(**config_kwargs)


def load_override_payload(raw: str | None = None) -> dict[str, Any]:
    """Return the remix-data overrides supplied by the hosting environment.

    The payload is JSON shaped like ``{"overrides": {"remixData": {...}}}``
    and is read from ``KOJI_OVERRIDES`` unless *raw* is given. A missing
    payload, or one without ``overrides.remixData``, yields ``{}``.
    """
    if raw is None:
        raw = os.environ.get("KOJI_OVERRIDES")
    if raw is None or not raw.strip():
        return {}

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise KojiConfigError(f"KOJI_OVERRIDES is not valid JSON: {raw[:64]}") from exc

    if not isinstance(payload, dict):
        return {}
    overrides = payload.get("overrides")
    if not isinstance(overrides, dict):
        return {}
    remix_data = overrides.get("remixData")
    return remix_data if isinstance(remix_data, dict) else {}
