"""Remix value store.

The store owns the customization value tree of a hosted Koji. It is the
only component allowed to replace the tree; every write builds a new tree
and swaps it in, then pushes the whole tree to the host.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from pykoji._constants import (
    EVENT_CANCEL,
    EVENT_DECRYPT_VALUE,
    EVENT_ENCRYPT_VALUE,
    EVENT_FINISH,
    EVENT_IS_REMIXING,
    EVENT_VALUE_DECRYPTED,
    EVENT_VALUE_ENCRYPTED,
)
from pykoji.bridge import MessageBridge
from pykoji.config import load_override_payload
from pykoji.exceptions import KojiConfigError, KojiStateError
from pykoji.models.host import DecryptValueData, EncryptValueData, HostEvent
from pykoji.remix.sync import push_values
from pykoji.remix.tree import deep_merge, get_path

_logger = logging.getLogger(__name__)


class RemixStore:
    """Manages the remixing experience for a Koji.

    Usage::

        store = RemixStore(bridge)
        store.init({"colors": {"background": "#fff"}})
        await store.wait_until_ready()
        await store.set({"colors": {"text": "#000"}})

    Parameters
    ----------
    bridge
        Message bridge to the host frame.
    reply_timeout
        Seconds to wait for host replies. ``None`` defers to the bridge.
    override_loader
        Callable returning the host-supplied overrides used by :meth:`init`
        when none are passed explicitly. Defaults to reading
        ``KOJI_OVERRIDES``.
    """

    def __init__(
        self,
        bridge: MessageBridge,
        *,
        reply_timeout: float | None = None,
        override_loader: Callable[[], Mapping[str, Any]] = load_override_payload,
    ) -> None:
        self._bridge = bridge
        self._reply_timeout = reply_timeout
        self._override_loader = override_loader
        self._values: dict[str, Any] = {}
        self._initialized = False
        self._ready = asyncio.Event()
        # The host answers the client's readiness message with IsRemixing;
        # only then can pushed values be registered.
        self._ready_subscription = bridge.on_message(self._on_is_remixing, EVENT_IS_REMIXING)

    def _on_is_remixing(self, _message: dict[str, Any]) -> None:
        if self._ready.is_set():
            return
        _logger.debug("Host signalled remix readiness")
        self._ready.set()
        self._ready_subscription.unsubscribe()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def is_ready(self) -> bool:
        """Whether the host has sent its readiness signal."""
        return self._ready.is_set()

    async def wait_until_ready(self, timeout: float | None = None) -> None:
        """Wait for the host readiness signal.

        Raises :class:`TimeoutError` when *timeout* expires first.
        """
        if timeout is None:
            await self._ready.wait()
            return
        await asyncio.wait_for(self._ready.wait(), timeout)

    def init(self, defaults: Mapping[str, Any] | None, overrides: Mapping[str, Any] | None = None) -> None:
        """Initialize the value tree with default values.

        Host overrides (from *overrides*, or the override loader) are merged
        over *defaults*: lists are replaced wholesale, mappings merged key by
        key.

        Raises
        ------
        KojiConfigError
            If *defaults* is missing.
        KojiStateError
            If the store was already initialized.
        """
        if defaults is None:
            raise KojiConfigError("Unable to find remix data defaults")
        if not isinstance(defaults, Mapping):
            raise KojiConfigError(f"Remix data defaults must be a mapping, got {type(defaults).__name__}")
        if self._initialized:
            raise KojiStateError(
                "Remix data is already initialized. Note that KojiFrontend.configure() calls init() for you."
            )

        if overrides is None:
            overrides = self._override_loader()
        self._values = deep_merge(defaults, overrides or {})
        self._initialized = True
        _logger.debug("Remix data initialized keys=%s overridden=%s", sorted(self._values), sorted(overrides or {}))

    def close(self) -> None:
        """Stop listening for the readiness signal."""
        self._ready_subscription.unsubscribe()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, path: Sequence[Any] | None = None, default: Any = None) -> Any:
        """Return the whole value tree, or the value at *path*.

        The returned objects belong to the store; treat them as read-only.
        """
        if path is None:
            return self._values
        return get_path(self._values, path, default)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _require_ready(self, operation: str) -> None:
        if not self.is_ready:
            raise KojiStateError(
                f"{operation}() was called before the host signalled readiness. "
                "Call KojiFrontend.ready() and wait for the host first."
            )

    async def set(self, partial: Mapping[str, Any]) -> bool:
        """Merge *partial* into the value tree and push the result to the host.

        Only keys present in *partial* change; use :meth:`overwrite` to
        replace everything.
        """
        self._require_ready("set")
        if not isinstance(partial, Mapping):
            raise TypeError(f"set() expects a mapping, got {type(partial).__name__}")
        self._values = deep_merge(self._values, partial)
        return await self._push()

    async def overwrite(self, new_tree: Mapping[str, Any]) -> bool:
        """Replace the whole value tree and push it to the host."""
        if not isinstance(new_tree, Mapping):
            raise TypeError(f"overwrite() expects a mapping, got {type(new_tree).__name__}")
        if not self.is_ready:
            _logger.debug("overwrite() called before host readiness")
        self._values = copy.deepcopy(dict(new_tree))
        return await self._push()

    async def _push(self) -> bool:
        return await push_values(self._bridge, self._values, timeout=self._reply_timeout)

    # ------------------------------------------------------------------
    # Host navigation
    # ------------------------------------------------------------------

    def finish(self) -> None:
        """Advance the Koji from remix to preview."""
        self._require_ready("finish")
        self._bridge.send_message(HostEvent(name=EVENT_FINISH))

    def cancel(self) -> None:
        """Leave the remix experience; the host may ask the user to confirm."""
        self._bridge.send_message(HostEvent(name=EVENT_CANCEL))

    # ------------------------------------------------------------------
    # Host-side encryption relay
    # ------------------------------------------------------------------

    async def encrypt_value(self, raw_value: Any) -> Any:
        """Have the host encrypt *raw_value* and return the encrypted value.

        The encrypted value can be decrypted here by the creator, or
        resolved on the backend with :meth:`pykoji.Secret.resolve_value`.
        """
        reply = await self._bridge.send_message_and_await_response(
            HostEvent(name=EVENT_ENCRYPT_VALUE, data=EncryptValueData(plaintext_value=raw_value).to_body()),
            EVENT_VALUE_ENCRYPTED,
            timeout=self._reply_timeout,
        )
        return reply.get("encryptedValue")

    async def decrypt_value(self, encrypted_value: Any) -> Any:
        """Have the host decrypt a value stored with :meth:`encrypt_value`.

        Only the Koji's creator can decrypt on the frontend.
        """
        reply = await self._bridge.send_message_and_await_response(
            HostEvent(name=EVENT_DECRYPT_VALUE, data=DecryptValueData(encrypted_value=encrypted_value).to_body()),
            EVENT_VALUE_DECRYPTED,
            timeout=self._reply_timeout,
        )
        return reply.get("decryptedValue")
