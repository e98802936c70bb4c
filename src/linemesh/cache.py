from __future__ import annotations

import threading
from typing import Any, Callable, Generic, Hashable, TypeVar

T = TypeVar("T")

AUTO_KEY = "auto"


def entity_key(entity: Any) -> Hashable:
    """The entity handle, or a per-instance key for entities that carry none.

    Instance keys never equal a handle and are not shared between two entity objects,
    so an entity without a handle is only a cache hit when the very same object is
    drawn again.
    """
    handle = getattr(entity, "handle", None)
    if handle is None:
        return (AUTO_KEY, id(entity))
    return handle


class EntityCache(Generic[T]):
    """Draw results keyed by a stable entity identifier.

    Entries are never evicted; the cache lives as long as its owner. Each entry keeps the
    entity it was built from, which also keeps instance keys from being reused.
    """

    def __init__(self, key: Callable[[Any], Hashable] = entity_key) -> None:
        self._key = key
        self._entries: dict[Hashable, tuple[Any, T]] = {}
        self._key_locks: dict[Hashable, threading.Lock] = {}
        self._lock = threading.Lock()

    def __contains__(self, entity: Any) -> bool:
        return self._key(entity) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, entity: Any) -> T | None:
        entry = self._entries.get(self._key(entity))
        return None if entry is None else entry[1]

    def set(self, entity: Any, value: T) -> None:
        with self._lock:
            self._entries[self._key(entity)] = (entity, value)

    def get_or_create(self, entity: Any, factory: Callable[[Any], T]) -> tuple[T, bool]:
        """Returns ``(value, created)``, running ``factory`` at most once per key.

        Only callers asking for the same key wait on each other.
        """
        key = self._key(entity)
        entry = self._entries.get(key)
        if entry is not None:
            return entry[1], False

        with self._lock:
            key_lock = self._key_locks.setdefault(key, threading.Lock())
        with key_lock:
            entry = self._entries.get(key)
            if entry is not None:
                return entry[1], False
            value = factory(entity)
            with self._lock:
                self._entries[key] = (entity, value)
                # later callers hit the stored entry; waiters on key_lock re-check it
                self._key_locks.pop(key, None)
            return value, True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
