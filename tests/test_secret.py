from __future__ import annotations

import pytest

from pykoji.backend.secret import Secret
from pykoji.config import KojiConfig

from .fakes_http import FakeHttpSession


@pytest.mark.asyncio
async def test_resolve_value_posts_scope_and_token() -> None:
    config = KojiConfig(project_id="proj-1", project_token="tok-1", rest_url="https://rest.example.com")
    session = FakeHttpSession(responder=lambda _url, _body: (200, {"decryptedValue": "hunter2"}))

    async with Secret(config, session=session) as secret:  # type: ignore[arg-type]
        value = await secret.resolve_value("keystore/abc")

    url, body, headers = session.calls[0]
    assert url == "https://rest.example.com/v1/keystore/get"
    assert body == {"scope": "proj-1", "token": "tok-1", "keyPath": "keystore/abc"}
    assert headers["X-Koji-Project-Id"] == "proj-1"
    assert value == "hunter2"


@pytest.mark.asyncio
async def test_generate_signed_url() -> None:
    config = KojiConfig(project_id="proj-1", project_token="tok-1")
    session = FakeHttpSession(responder=lambda _url, _body: (200, {"url": "https://cdn.example.com/signed"}))

    async with Secret(config, session=session) as secret:  # type: ignore[arg-type]
        url = await secret.generate_signed_url("https://images.koji-cdn.com/a.png?blur=10", expire_seconds=60)
        assert await secret.generate_signed_url("https://images.koji-cdn.com/a.png") == "https://cdn.example.com/signed"

    assert url == "https://cdn.example.com/signed"
    assert session.calls[0][0] == "https://rest.api.gokoji.com/v1/cdn/signedRequest/create"
    assert session.calls[0][1] == {"resource": "https://images.koji-cdn.com/a.png?blur=10", "expireSeconds": 60}
    assert session.calls[1][1] == {"resource": "https://images.koji-cdn.com/a.png"}


@pytest.mark.asyncio
async def test_secret_owns_and_closes_its_session(monkeypatch: pytest.MonkeyPatch) -> None:
    created: list[FakeHttpSession] = []

    def fake_client_session() -> FakeHttpSession:
        session = FakeHttpSession()
        created.append(session)
        return session

    monkeypatch.setattr("pykoji.backend._base.aiohttp.ClientSession", fake_client_session)

    async with Secret(KojiConfig(project_id="p", project_token="t")):
        pass

    assert len(created) == 1
    assert created[0].closed is True
