"""Custom exception hierarchy for pykoji."""

from __future__ import annotations


class KojiError(Exception):
    """Base exception for all pykoji errors."""


class KojiConfigError(KojiError):
    """Invalid or missing configuration (including missing init data)."""


class KojiStateError(KojiError):
    """Operation invoked in the wrong lifecycle phase.

    Raised for a second ``init`` call, for writes or ``finish`` before the
    host has sent its readiness signal, and for clients used outside of
    their ``async with`` block.
    """


class KojiReplyTimeoutError(KojiError, TimeoutError):
    """The host did not send the expected reply within the configured timeout."""

    def __init__(self, message: str, *, event_name: str = "") -> None:
        self.event_name = event_name
        super().__init__(message)


class KojiChannelError(KojiError):
    """Host channel failure (broker connect, publish)."""


class KojiTransportError(KojiError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)
