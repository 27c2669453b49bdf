"""Per-thread string interning.

Interned strings are canonical objects: every call to :func:`intern` with an
equal string returns the very same object within one thread.
"""

from __future__ import annotations

import threading

_local = threading.local()


def _cache() -> dict[str, str]:
    cache = getattr(_local, "strings", None)
    if cache is None:
        cache = {}
        _local.strings = cache
    return cache


def intern(text: str) -> str:
    """Return the canonical object for ``text``, registering it if new."""
    if not isinstance(text, str):
        raise TypeError(f"can only intern str, not {type(text).__name__}")
    return _cache().setdefault(text, text)


def lookup_interned(text: str) -> str | None:
    """Return the canonical object for ``text`` if it was interned already."""
    return _cache().get(text)