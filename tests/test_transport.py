from __future__ import annotations

import aiohttp
import pytest

from pykoji._transport import JsonTransport
from pykoji.exceptions import KojiTransportError

from .fakes_http import FakeHttpSession


@pytest.mark.asyncio
async def test_post_json_sends_body_and_headers() -> None:
    session = FakeHttpSession(responder=lambda _url, body: (200, {"echo": body}))
    transport = JsonTransport("https://api.example.com/", session, headers={"X-Test": "1"})  # type: ignore[arg-type]

    result = await transport.post_json("/v1/thing", {"a": 1})

    assert result == {"echo": {"a": 1}}
    url, body, headers = session.calls[0]
    assert url == "https://api.example.com/v1/thing"
    assert body == {"a": 1}
    assert headers == {"Content-Type": "application/json", "X-Test": "1"}


@pytest.mark.asyncio
async def test_post_json_non_2xx_raises_with_status() -> None:
    session = FakeHttpSession(responder=lambda _url, _body: (401, {"error": "bad token"}))
    transport = JsonTransport("https://api.example.com", session)  # type: ignore[arg-type]

    with pytest.raises(KojiTransportError) as excinfo:
        await transport.post_json("/v1/thing", {})

    assert excinfo.value.status_code == 401
    assert excinfo.value.endpoint == "/v1/thing"


@pytest.mark.asyncio
async def test_post_json_invalid_json_raises() -> None:
    session = FakeHttpSession(responder=lambda _url, _body: (200, "<html>oops</html>"))
    transport = JsonTransport("https://api.example.com", session)  # type: ignore[arg-type]

    with pytest.raises(KojiTransportError, match="Invalid JSON"):
        await transport.post_json("/v1/thing", {})


@pytest.mark.asyncio
async def test_post_json_empty_body_is_empty_object() -> None:
    session = FakeHttpSession(responder=lambda _url, _body: (200, ""))
    transport = JsonTransport("https://api.example.com", session)  # type: ignore[arg-type]

    assert await transport.post_json("/v1/thing", {}) == {}


@pytest.mark.asyncio
async def test_post_json_client_error_is_wrapped() -> None:
    session = FakeHttpSession(error=aiohttp.ClientConnectionError("down"))
    transport = JsonTransport("https://api.example.com", session)  # type: ignore[arg-type]

    with pytest.raises(KojiTransportError, match="failed"):
        await transport.post_json("/v1/thing", {})
