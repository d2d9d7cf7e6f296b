"""Message bridge between the client and its host frame.

The bridge turns an opaque, asynchronous host channel into three
operations: fire-and-forget sends, send-then-await-reply, and named
subscriptions. Replies are correlated by event name only; there is no
request id on the wire.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from pykoji._redact import redact_for_log
from pykoji.exceptions import KojiReplyTimeoutError, KojiStateError
from pykoji.models.host import HostEvent, message_name

_logger = logging.getLogger(__name__)

MessageCallback = Callable[[dict[str, Any]], None]


class HostChannel(Protocol):
    """Structural interface of the transport to the host frame.

    ``start`` receives the callback inbound messages must be handed to; it
    has to be invoked on the event loop thread. ``post`` sends one
    JSON-serializable message.
    """

    def start(self, on_message: MessageCallback) -> None:
        ...

    def post(self, message: dict[str, Any]) -> None:
        ...

    def stop(self) -> None:
        ...


@dataclass(slots=True)
class _PendingReply:
    """A reply awaited by a bridge caller, matched on event name."""

    event_name: str
    future: asyncio.Future[dict[str, Any]]


@dataclass(slots=True, eq=False)
class Subscription:
    """Handle returned by :meth:`MessageBridge.on_message`."""

    event_name: str
    callback: MessageCallback
    _bridge: MessageBridge | None = field(default=None, repr=False)

    @property
    def active(self) -> bool:
        return self._bridge is not None

    def unsubscribe(self) -> None:
        """Stop receiving messages. Safe to call more than once."""
        bridge = self._bridge
        self._bridge = None
        if bridge is not None:
            bridge._remove_subscription(self)


class MessageBridge:
    """Send structured events to the host and correlate its replies.

    Parameters
    ----------
    channel
        Transport used for outbound messages. Inbound messages reach the
        bridge through :meth:`dispatch`.
    reply_timeout
        Default seconds to wait for a reply. ``None`` waits indefinitely.
    """

    def __init__(self, channel: HostChannel, *, reply_timeout: float | None = None) -> None:
        self._channel = channel
        self._reply_timeout = reply_timeout
        self._pending: list[_PendingReply] = []
        self._subscriptions: dict[str, list[Subscription]] = {}
        self._closed = False

    @property
    def pending_count(self) -> int:
        """Number of replies currently awaited."""
        return sum(1 for p in self._pending if not p.future.done())

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    def _require_open(self) -> None:
        if self._closed:
            raise KojiStateError("Message bridge is closed")

    def send_message(self, event: HostEvent) -> None:
        """Post *event* to the host without waiting for anything."""
        self._require_open()
        message = event.to_wire()
        _logger.debug("Posting host message name=%s payload=%s", event.name, redact_for_log(message))
        self._channel.post(message)

    async def send_message_and_await_response(
        self,
        event: HostEvent,
        expected_reply_name: str,
        *,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """Post *event*, then wait for the first ``expected_reply_name`` message.

        Parameters
        ----------
        event
            Event to send.
        expected_reply_name
            Name of the host message that answers *event*.
        timeout
            Seconds to wait. Falls back to the bridge's ``reply_timeout``.

        Returns
        -------
        dict
            The whole inbound reply message.

        Raises
        ------
        KojiReplyTimeoutError
            When a timeout is in effect and no reply arrives in time.
        """
        self._require_open()
        return await self._await_reply(expected_reply_name, timeout=timeout, send=event)

    async def wait_for_message(self, event_name: str, *, timeout: float | None = None) -> dict[str, Any]:
        """Wait for the next ``event_name`` message without sending anything."""
        self._require_open()
        return await self._await_reply(event_name, timeout=timeout, send=None)

    async def _await_reply(
        self,
        event_name: str,
        *,
        timeout: float | None,
        send: HostEvent | None,
    ) -> dict[str, Any]:
        loop = asyncio.get_running_loop()
        fut: asyncio.Future[dict[str, Any]] = loop.create_future()
        pending = _PendingReply(event_name=event_name, future=fut)
        # Registered before posting so a reply delivered synchronously is not lost.
        self._pending.append(pending)
        effective_timeout = timeout if timeout is not None else self._reply_timeout
        try:
            if send is not None:
                self.send_message(send)
            if effective_timeout is None:
                return await fut
            return await asyncio.wait_for(fut, effective_timeout)
        except TimeoutError as exc:
            _logger.debug("No %s reply within %.3fs", event_name, effective_timeout)
            raise KojiReplyTimeoutError(
                f"Host did not reply with {event_name} within {effective_timeout}s",
                event_name=event_name,
            ) from exc
        finally:
            with contextlib.suppress(ValueError):
                self._pending.remove(pending)

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    def on_message(self, callback: MessageCallback, event_name: str) -> Subscription:
        """Run *callback* for every ``event_name`` message until unsubscribed."""
        self._require_open()
        subscription = Subscription(event_name=event_name, callback=callback, _bridge=self)
        self._subscriptions.setdefault(event_name, []).append(subscription)
        return subscription

    def _remove_subscription(self, subscription: Subscription) -> None:
        subs = self._subscriptions.get(subscription.event_name)
        if subs is None:
            return
        self._subscriptions[subscription.event_name] = [s for s in subs if s is not subscription]
        if not self._subscriptions[subscription.event_name]:
            self._subscriptions.pop(subscription.event_name, None)

    def dispatch(self, message: Any) -> None:
        """Route one inbound host message to pending replies and subscribers.

        Must be called on the event loop thread.
        """
        name = message_name(message)
        if name is None:
            _logger.debug("Ignoring unnamed host message: %s", redact_for_log(message))
            return

        payload: dict[str, Any] = dict(message)
        _logger.debug("Host message received name=%s payload=%s", name, redact_for_log(payload))

        # One reply resolves one request, oldest first.
        for pending in self._pending:
            if pending.event_name == name and not pending.future.done():
                pending.future.set_result(payload)
                break

        for subscription in list(self._subscriptions.get(name, [])):
            if not subscription.active:
                continue
            try:
                subscription.callback(payload)
            except Exception:
                _logger.debug("Subscriber callback for %s failed", name, exc_info=True)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Cancel pending replies and drop subscriptions."""
        self._closed = True
        for pending in self._pending:
            if not pending.future.done():
                pending.future.cancel()
        self._pending.clear()
        for subs in list(self._subscriptions.values()):
            for subscription in subs:
                subscription._bridge = None
        self._subscriptions.clear()
