from __future__ import annotations

import asyncio
from typing import Any

import pytest

from pykoji._mqtt import MqttHostChannel, decode_host_message, encode_host_message
from pykoji.config import HostChannelProfile
from pykoji.exceptions import KojiChannelError, KojiConfigError


def test_encode_and_decode_host_message() -> None:
    raw = encode_host_message({"_type": "Koji.Ready"})
    assert raw == b'{"_type":"Koji.Ready"}'
    assert decode_host_message(b' {"event": "KojiPreview.IsRemixing"} ') == {"event": "KojiPreview.IsRemixing"}

    with pytest.raises(ValueError):
        decode_host_message(b"[1, 2]")


def test_channel_requires_broker_host() -> None:
    loop = asyncio.new_event_loop()
    try:
        with pytest.raises(KojiConfigError):
            MqttHostChannel(HostChannelProfile(), loop=loop)
    finally:
        loop.close()


@pytest.mark.asyncio
async def test_inbound_messages_reach_callback_on_loop() -> None:
    channel = MqttHostChannel(HostChannelProfile(host="broker.example.com"), loop=asyncio.get_running_loop())
    received: list[dict[str, Any]] = []
    channel._on_message = received.append  # type: ignore[attr-defined]  # noqa: SLF001

    channel._deliver(b'{"event": "KojiPreview.IsRemixing"}', "koji/host/events")  # noqa: SLF001
    channel._deliver(b"not json", "koji/host/events")  # noqa: SLF001
    await asyncio.sleep(0)

    assert received == [{"event": "KojiPreview.IsRemixing"}]


def test_post_before_start_raises() -> None:
    loop = asyncio.new_event_loop()
    try:
        channel = MqttHostChannel(HostChannelProfile(host="broker.example.com"), loop=loop)
        with pytest.raises(KojiChannelError):
            channel.post({"_type": "Koji.Ready"})
        assert channel.is_running is False
    finally:
        loop.close()
