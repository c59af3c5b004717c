"""Run-scoped report key -> uuid cache."""

from __future__ import annotations

import contextlib
import threading
from typing import Callable, ContextManager, Optional


class IdentifierCache:
    """Write-once mapping of report keys to resolved uuids.

    Thread-safe when ``thread_safe`` is set: :meth:`get_or_create` runs the
    check, the factory call and the store as one critical section, so two
    workers resolving the same unseen key get the same uuid. The factory
    must not call back into the cache.
    """

    def __init__(self, thread_safe: bool = True) -> None:
        self._lock: ContextManager = threading.Lock() if thread_safe else contextlib.nullcontext()
        self._uuids: dict[str, str] = {}

    def get_or_create(self, key: str, factory: Callable[[str], str]) -> str:
        with self._lock:
            uuid = self._uuids.get(key)
            if uuid is None:
                uuid = factory(key)
                self._uuids[key] = uuid
            return uuid

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._uuids.get(key)

    def snapshot(self) -> dict[str, str]:
        """Return a copy of every entry cached so far."""
        with self._lock:
            return dict(self._uuids)

    def clear(self) -> None:
        with self._lock:
            self._uuids.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._uuids

    def __len__(self) -> int:
        with self._lock:
            return len(self._uuids)
