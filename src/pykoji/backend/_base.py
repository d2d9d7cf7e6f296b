"""Shared lifecycle for backend REST helpers."""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Self

import aiohttp

from pykoji._transport import JsonTransport, Transport
from pykoji.config import KojiConfig
from pykoji.exceptions import KojiStateError

_logger = logging.getLogger(__name__)


class BackendClient:
    """Base for backend helpers that POST to one Koji REST host.

    Usage::

        async with Database(config) as database:
            document = await database.get("scores", "alice")

    The helper owns its ``aiohttp.ClientSession`` unless one is passed in.
    """

    _service: ClassVar[str] = "backend"

    def __init__(
        self,
        config: KojiConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._project_id, self._project_token = config.require_project_credentials()
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = None

    def _base_url(self) -> str:
        raise NotImplementedError

    def _headers(self) -> dict[str, str]:
        return {
            "X-Koji-Project-Id": self._project_id,
            "X-Koji-Project-Token": self._project_token,
            "Content-Type": "application/json",
        }

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> Self:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = JsonTransport(self._base_url(), self._http_session, headers=self._headers())
        _logger.debug("%s helper opened base_url=%s", self._service, self._base_url())
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise KojiStateError(
                f"{type(self).__name__} not initialized. Use 'async with {type(self).__name__}(...) as helper:'"
            )
        return self._transport

    async def _post(self, endpoint: str, body: dict[str, Any]) -> Any:
        return await self._require_transport().post_json(endpoint, body)
