"""Key-value stores with per-entry expiry for sessions and order groups."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Cache(Protocol):
    """Key-value store used for sessions and order group hints."""

    def get(self, key: str) -> object | None:
        """Return a stored value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a value for ``ttl_seconds``."""

    def delete(self, key: str) -> None:
        """Drop a stored value, if present."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class _Entry:
    value: object
    expires_at: datetime


@dataclass
class InMemoryCache(Cache):
    """Process-local store; entries vanish on restart."""

    clock: Callable[[], datetime] = _utcnow
    _entries: dict[str, _Entry] = field(default_factory=dict, repr=False)

    def get(self, key: str) -> object | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        now = self.clock()
        self._sweep(now)
        self._entries[key] = _Entry(
            value=value, expires_at=now + timedelta(seconds=ttl_seconds)
        )

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)

    def _sweep(self, now: datetime) -> None:
        expired = [
            key for key, entry in self._entries.items() if now >= entry.expires_at
        ]
        for key in expired:
            del self._entries[key]
