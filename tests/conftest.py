from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pytest

from pykoji.bridge import MessageBridge


@dataclass
class RecordingChannel:
    """In-memory host channel: records posts and can answer them."""

    sent: list[dict[str, Any]] = field(default_factory=list)
    auto_replies: dict[str, dict[str, Any]] = field(default_factory=dict)
    on_message: Callable[[dict[str, Any]], None] | None = None
    started: bool = False
    stopped: bool = False

    def start(self, on_message: Callable[[dict[str, Any]], None]) -> None:
        self.on_message = on_message
        self.started = True

    def post(self, message: dict[str, Any]) -> None:
        self.sent.append(message)
        reply = self.auto_replies.get(message.get("_type", ""))
        if reply is not None and self.on_message is not None:
            asyncio.get_running_loop().call_soon(self.on_message, dict(reply))

    def stop(self) -> None:
        self.stopped = True

    def deliver(self, message: dict[str, Any]) -> None:
        assert self.on_message is not None
        self.on_message(message)

    def sent_names(self) -> list[str]:
        return [str(m.get("_type")) for m in self.sent]


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def bridge(channel: RecordingChannel) -> MessageBridge:
    bridge = MessageBridge(channel)
    channel.start(bridge.dispatch)
    return bridge
