"""Lookup caching for the read-only registry tables."""

from __future__ import annotations

from collections.abc import Callable, Hashable
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class LookupCache(Generic[K, V]):
    """Memoize a single-argument lookup in a plain dict.

    Only valid over data that never changes after construction; there is no
    invalidation. Misses (``None`` results) are not stored, so the cache never
    holds more entries than the underlying table.
    """

    def __init__(self, fetch: Callable[[K], V]) -> None:
        self._fetch = fetch
        self._entries: dict[K, V] = {}

    def get(self, key: K) -> V:
        if key in self._entries:
            return self._entries[key]
        value = self._fetch(key)
        if value is not None:
            self._entries[key] = value
        return value

    def __len__(self) -> int:
        return len(self._entries)
