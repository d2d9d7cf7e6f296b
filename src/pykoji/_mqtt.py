"""MQTT host channel: JSON messages to and from the host frame."""

from __future__ import annotations

import asyncio
import json
import logging
import secrets
from typing import Any, cast

import paho.mqtt.client as mqtt

from pykoji.bridge import MessageCallback
from pykoji.config import HostChannelProfile
from pykoji.exceptions import KojiChannelError, KojiConfigError


def decode_host_message(payload: bytes) -> dict[str, Any]:
    """Parse an MQTT payload into a host message object."""
    text = payload.decode("utf-8").strip()
    parsed = json.loads(text)
    if not isinstance(parsed, dict):
        raise ValueError("Host message is not a JSON object")
    return parsed


def encode_host_message(message: dict[str, Any]) -> bytes:
    """Serialize a host message for publishing."""
    return json.dumps(message, separators=(",", ":")).encode("utf-8")


def _build_client_id(profile: HostChannelProfile) -> str:
    client_id = profile.client_id.strip()
    if client_id:
        return client_id
    return f"pykoji_{secrets.token_hex(8)}"


class MqttHostChannel:
    """Threaded paho-mqtt channel that hands inbound messages to an asyncio loop.

    Outbound messages are published on ``profile.outbound_topic``; messages
    arriving on ``profile.inbound_topic`` are decoded and passed to the
    ``on_message`` callback on the loop thread.
    """

    def __init__(
        self,
        profile: HostChannelProfile,
        *,
        loop: asyncio.AbstractEventLoop,
        logger: logging.Logger | None = None,
    ) -> None:
        if not profile.is_configured:
            raise KojiConfigError("Host channel broker host is not configured")
        self._profile = profile
        self._loop = loop
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._running = False
        self._on_message: MessageCallback | None = None

    @property
    def is_running(self) -> bool:
        """Whether the MQTT network loop is active."""
        return self._running

    def _deliver(self, payload: bytes, topic: str) -> None:
        try:
            message = decode_host_message(payload)
        except (UnicodeDecodeError, ValueError):
            self._logger.debug("Host message parse failure topic=%s", topic, exc_info=True)
            return
        callback = self._on_message
        if callback is not None:
            self._loop.call_soon_threadsafe(callback, message)

    def start(self, on_message: MessageCallback) -> None:
        """Connect, subscribe to the inbound topic and start the network loop."""
        self.stop()
        profile = self._profile
        self._on_message = on_message
        client_id = _build_client_id(profile)
        self._logger.debug(
            "Host channel start requested host=%s port=%s inbound=%s outbound=%s client_id=%s",
            profile.host,
            profile.port,
            profile.inbound_topic,
            profile.outbound_topic,
            client_id,
        )

        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=client_id,
            protocol=mqtt.MQTTv5,
        )
        client.enable_logger(self._logger)
        if profile.username:
            client.username_pw_set(profile.username, profile.password)
        if profile.tls:
            client.tls_set()

        def on_connect(
            c: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if reason_code.value != 0:
                self._logger.warning("Host channel connect failed: %s", reason_code)
                return
            self._logger.debug("Host channel connected, subscribing topic=%s", profile.inbound_topic)
            c.subscribe(profile.inbound_topic, qos=profile.qos)

        def on_message(_c: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
            self._deliver(msg.payload, msg.topic)

        def on_disconnect(
            _client: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if self._running:
                self._logger.debug("Host channel disconnected: %s", reason_code)

        client.on_connect = on_connect
        client.on_message = on_message
        client.on_disconnect = on_disconnect

        try:
            client.connect(profile.host, profile.port, keepalive=profile.keepalive)
        except OSError as exc:
            raise KojiChannelError(f"Unable to connect to host channel {profile.host}:{profile.port}: {exc}") from exc
        client.loop_start()

        self._client = client
        self._running = True
        self._logger.debug("Host channel network loop started")

    def post(self, message: dict[str, Any]) -> None:
        """Publish one message to the host."""
        client = self._client
        if client is None or not self._running:
            raise KojiChannelError("Host channel is not running")
        info = client.publish(self._profile.outbound_topic, encode_host_message(message), qos=self._profile.qos)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise KojiChannelError(f"Publishing to {self._profile.outbound_topic} failed rc={info.rc}")

    def stop(self) -> None:
        """Stop and disconnect the current MQTT client if running."""
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False
        self._on_message = None

        if client is None:
            return
        try:
            if was_running:
                self._logger.debug("Host channel disconnect requested")
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("Host channel network loop stopped")
