"""Helpers for safe debug logging.

Host messages and backend requests carry project tokens and values the
host encrypts on the creator's behalf. This module redacts those fields
before they reach DEBUG logs, and shortens the remix value tree that every
``SetValue`` message carries in full.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "token",
        "projecttoken",
        "x-koji-project-token",
        "authorization",
        "cookie",
        # Values relayed to/from the keystore
        "plaintextvalue",
        "decryptedvalue",
    }
)

# Ciphertext is not secret but is long and useless in a log line.
_ENCRYPTED_VALUE_KEYS: frozenset[str] = frozenset({"encryptedvalue"})

# Whole remix trees pushed to the host.
_TREE_VALUE_KEYS: frozenset[str] = frozenset({"newvalue"})

_MAX_DEPTH = 20


def _describe_encrypted(value: Any) -> str:
    if isinstance(value, str):
        return f"<encrypted:{len(value)}ch>"
    return "<encrypted>"


def _describe_tree(value: Any) -> Any:
    if isinstance(value, Mapping):
        return f"<tree keys={sorted(str(k) for k in value)}>"
    return None


def _redact_entry(key: str, value: Any, max_string: int, depth: int) -> Any:
    lowered = key.lower()
    if lowered in _SENSITIVE_VALUE_KEYS:
        return "<redacted>"
    if lowered in _ENCRYPTED_VALUE_KEYS and value is not None:
        return _describe_encrypted(value)
    if lowered in _TREE_VALUE_KEYS:
        summary = _describe_tree(value)
        if summary is not None:
            return summary
    return redact_for_log(value, max_string=max_string, _depth=depth + 1)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs.

    Sensitive fields become ``"<redacted>"``, encrypted values are reduced
    to their length, remix trees under ``newValue`` to their top-level keys,
    and strings longer than *max_string* are truncated.
    """
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        return {str(k): _redact_entry(str(k), v, max_string, _depth) for k, v in value.items()}

    if isinstance(value, Sequence):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]

    return repr(value)
