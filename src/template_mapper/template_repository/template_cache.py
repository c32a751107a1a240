"""In-memory template cache owned by one repository."""

from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from template_mapper.template_entities import Template


@dataclass(frozen=True)
class CacheStats:
    """Snapshot of the cache contents."""

    size: int
    keys: tuple[str, ...]
    pending_loads: int = 0


@dataclass
class _KeyLock:
    lock: threading.Lock
    holders: int = 0


class TemplateCache:
    """Maps canonical path strings to loaded templates.

    Without a capacity the cache only shrinks through ``clear``. With a
    capacity it keeps the most recently used entries and ``keys`` are listed
    from least to most recently used. Per-key load locks exist only while a
    caller holds or waits for them.
    """

    def __init__(self, capacity: int | None = None) -> None:
        if capacity is not None and capacity < 1:
            raise ValueError("Cache capacity must be at least 1.")
        self._capacity = capacity
        self._entries: OrderedDict[str, Template] = OrderedDict()
        self._guard = threading.Lock()
        self._key_locks: dict[str, _KeyLock] = {}

    def get(self, key: str) -> Template | None:
        with self._guard:
            template = self._entries.get(key)
            if template is not None and self._capacity is not None:
                self._entries.move_to_end(key)
            return template

    def put(self, key: str, template: Template) -> None:
        with self._guard:
            self._entries[key] = template
            if self._capacity is not None:
                self._entries.move_to_end(key)
                while len(self._entries) > self._capacity:
                    self._entries.popitem(last=False)

    def discard(self, key: str) -> None:
        with self._guard:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._guard:
            self._entries.clear()

    @contextmanager
    def key_lock(self, key: str) -> Iterator[None]:
        """Serialize loads of one key; the lock is dropped once nobody needs it."""
        with self._guard:
            entry = self._key_locks.get(key)
            if entry is None:
                entry = self._key_locks[key] = _KeyLock(lock=threading.Lock())
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._key_locks[key]

    def stats(self) -> CacheStats:
        with self._guard:
            return CacheStats(
                size=len(self._entries),
                keys=tuple(self._entries),
                pending_loads=len(self._key_locks),
            )
