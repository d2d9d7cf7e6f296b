"""Push the remix value tree to the host and report whether it was applied."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pykoji._constants import EVENT_DID_CHANGE_VCC, EVENT_SET_VALUE, REMIX_DATA_PATH
from pykoji.bridge import MessageBridge
from pykoji.exceptions import KojiReplyTimeoutError
from pykoji.models.host import HostEvent, SetValueData

_logger = logging.getLogger(__name__)


def build_set_value_event(tree: Mapping[str, Any]) -> HostEvent:
    """Build the ``KojiPreview.SetValue`` event carrying the whole tree."""
    data = SetValueData(path=list(REMIX_DATA_PATH), new_value=dict(tree), skip_update=False)
    return HostEvent(name=EVENT_SET_VALUE, data=data.to_body())


async def push_values(
    bridge: MessageBridge,
    tree: Mapping[str, Any],
    *,
    timeout: float | None = None,
) -> bool:
    """Send the full *tree* to the host and await its acknowledgement.

    Returns ``True`` when a non-empty ``KojiPreview.DidChangeVcc`` reply
    arrives, ``False`` when the reply is empty or a reply timeout expires.
    """
    try:
        reply = await bridge.send_message_and_await_response(
            build_set_value_event(tree),
            EVENT_DID_CHANGE_VCC,
            timeout=timeout,
        )
    except KojiReplyTimeoutError:
        _logger.warning("Host did not acknowledge remix data push")
        return False

    _logger.debug("Host acknowledged remix data push path=%s", reply.get("path"))
    return bool(reply)
