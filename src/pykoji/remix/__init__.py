"""Remix layer.

This package owns the customization value tree of a hosted Koji and the
protocol that keeps the host frame in sync with it.
"""

from pykoji.remix.store import RemixStore
from pykoji.remix.sync import push_values
from pykoji.remix.tree import deep_merge, get_path

__all__ = ["RemixStore", "deep_merge", "get_path", "push_values"]
