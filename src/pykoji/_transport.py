"""HTTP transport for the platform's JSON REST APIs."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pykoji._redact import redact_for_log
from pykoji.exceptions import KojiTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the backend helpers.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`JsonTransport`) concrete.
    """

    async def post_json(self, endpoint: str, body: Mapping[str, Any]) -> Any:
        ...


class JsonTransport:
    """POST JSON bodies to one base URL with fixed project headers."""

    def __init__(
        self,
        base_url: str,
        http_session: aiohttp.ClientSession,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http_session
        self._headers: dict[str, str] = {"Content-Type": "application/json", **(headers or {})}

    @property
    def base_url(self) -> str:
        return self._base_url

    async def post_json(self, endpoint: str, body: Mapping[str, Any]) -> Any:
        """POST *body* as JSON to ``base_url + endpoint`` and return the decoded reply.

        Raises :class:`KojiTransportError` on network failures, non-2xx
        statuses and bodies that are not JSON.
        """
        url = f"{self._base_url}{endpoint}"
        data = json.dumps(body, separators=(",", ":"))

        _logger.debug("POST %s body=%s", url, redact_for_log(body))

        try:
            async with self._http.post(url, data=data, headers=self._headers) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise KojiTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except KojiTransportError:
            raise
        except aiohttp.ClientError as exc:
            raise KojiTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        if not text.strip():
            return {}

        try:
            result = json.loads(text)
        except json.JSONDecodeError as exc:
            raise KojiTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        _logger.debug("Response %s body=%s", endpoint, redact_for_log(result))
        return result
