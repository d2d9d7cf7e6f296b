from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass
class FakeResponse:
    status: int
    body: str

    async def text(self) -> str:
        return self.body

    async def __aenter__(self) -> FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


@dataclass
class FakeHttpSession:
    """Stands in for ``aiohttp.ClientSession``; answers through ``responder``."""

    responder: Callable[[str, dict[str, Any]], tuple[int, Any]] = lambda _url, _body: (200, {})
    calls: list[tuple[str, dict[str, Any], dict[str, str]]] = field(default_factory=list)
    error: Exception | None = None
    closed: bool = False

    def post(self, url: str, *, data: str, headers: dict[str, str]) -> FakeResponse:
        body = json.loads(data)
        self.calls.append((url, body, dict(headers)))
        if self.error is not None:
            raise self.error
        status, payload = self.responder(url, body)
        text = payload if isinstance(payload, str) else json.dumps(payload)
        return FakeResponse(status=status, body=text)

    async def close(self) -> None:
        self.closed = True
