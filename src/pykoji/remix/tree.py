"""Value tree helpers: deep merge and nested lookup.

Merges never mutate their inputs. The result is a fresh tree so the store
can swap it in atomically.
"""

from __future__ import annotations

import copy
from collections.abc import Hashable, Mapping, Sequence
from typing import Any

_MISSING = object()


def deep_merge(target: Mapping[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *patch* over *target* and return a new tree.

    - mappings present on both sides merge key by key, recursively
    - sequences in *patch* replace the target value wholesale
    - any other value in *patch* replaces the target value
    - keys only present in *target* are kept
    """
    merged: dict[str, Any] = {key: copy.deepcopy(value) for key, value in target.items()}
    for key, value in patch.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _step(node: Any, key: Any) -> Any:
    if isinstance(node, Mapping):
        if not isinstance(key, Hashable):
            return _MISSING
        return node.get(key, _MISSING)

    if isinstance(node, Sequence) and not isinstance(node, (str, bytes, bytearray)):
        if isinstance(key, bool):
            return _MISSING
        if isinstance(key, int):
            index = key
        elif isinstance(key, str) and key.isdigit():
            index = int(key)
        else:
            return _MISSING
        if 0 <= index < len(node):
            return node[index]

    return _MISSING


def get_path(tree: Mapping[str, Any], path: Sequence[Any], default: Any = None) -> Any:
    """Look up a nested value by *path*.

    Each segment is a mapping key, or an index (``int`` or numeric string)
    into a list. Returns *default* when any segment is absent. A stored
    ``None`` is returned as-is.
    """
    node: Any = tree
    for key in path:
        node = _step(node, key)
        if node is _MISSING:
            return default
    return node
