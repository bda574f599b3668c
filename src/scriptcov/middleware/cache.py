"""Memo of instrumented response bodies keyed by request path."""

from __future__ import annotations

from typing import TYPE_CHECKING

from scriptcov import logger

if TYPE_CHECKING:
    from collections.abc import Callable


class InstrumentationCache:
    """Path -> instrumented body.

    Entries are never evicted individually; :meth:`clear` drops everything and
    must run between independent test runs.  Concurrent writers for the same
    key store equivalent output, so no locking is done.
    """

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._entries.get(key)

    def put(self, key: str, value: str) -> None:
        self._entries[key] = value

    def get_or_create(self, key: str, factory: Callable[[], str]) -> str:
        """Return the cached value for *key*, computing and storing it on a miss."""
        value = self._entries.get(key)
        if value is None:
            logger.debug("cache miss %s", key)
            value = factory()
            self._entries[key] = value
        return value

    def clear(self) -> None:
        logger.debug("clearing %d cached entries", len(self._entries))
        self._entries = {}

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["InstrumentationCache"]
