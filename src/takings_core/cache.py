"""Cache-aside storage for computed daily takings.

Entries are keyed by (account id, window key). Two tiers are provided:

- MemoryCache: in-process, 5 minute TTL
- FileCache: JSON documents under DataPaths.cache_dir, 30 minute TTL

TieredCache reads memory first, then file (promoting file hits into
memory), and writes to every tier. Cache I/O problems are logged and
treated as misses; they never fail a takings request.
"""

from __future__ import annotations

import json
import logging
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Protocol

from takings_core.takings.models import DailyTaking

if TYPE_CHECKING:
    from takings_core.config import DataPaths

logger = logging.getLogger(__name__)

MEMORY_TTL_SECONDS = 5 * 60
FILE_TTL_SECONDS = 30 * 60

DEFAULT_WINDOW_PREFIX = "default"

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]+")


def window_key(from_date: str | None, days_to_load: int) -> str:
    """Cache window key: the from-date, else "default-<days>d".

    Examples:
        >>> window_key(None, 31)
        'default-31d'
        >>> window_key("2024-03-01", 31)
        '2024-03-01'
    """
    if from_date:
        return from_date
    return f"{DEFAULT_WINDOW_PREFIX}-{days_to_load}d"


@dataclass
class CacheEntry:
    """A cached takings sequence.

    Attributes:
        account_id: Account the takings belong to.
        key: Window key (from-date, "default-<days>d" or "critical-7d").
        data: The takings, newest first.
        timestamp: Epoch seconds when the entry was written.
    """

    account_id: str
    key: str
    data: list[DailyTaking] = field(default_factory=list)
    timestamp: float = 0.0

    def is_fresh(self, ttl: float, now: float) -> bool:
        return now - self.timestamp < ttl

    def to_json(self) -> str:
        return json.dumps(
            {
                "account_id": self.account_id,
                "key": self.key,
                "timestamp": self.timestamp,
                "data": [d.to_dict() for d in self.data],
            },
            indent=2,
        )

    @classmethod
    def from_json(cls, text: str) -> CacheEntry:
        raw = json.loads(text)
        return cls(
            account_id=str(raw["account_id"]),
            key=str(raw["key"]),
            timestamp=float(raw["timestamp"]),
            data=[DailyTaking.from_dict(d) for d in raw.get("data") or []],
        )


class TakingsCache(Protocol):
    """Contract between the takings pipeline and its cache."""

    def get(self, account_id: str, key: str) -> CacheEntry | None: ...

    def set(self, account_id: str, key: str, data: list[DailyTaking]) -> None: ...


class MemoryCache:
    """In-process tier with a short TTL."""

    def __init__(
        self,
        ttl: float = MEMORY_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[tuple[str, str], CacheEntry] = {}

    def get(self, account_id: str, key: str) -> CacheEntry | None:
        entry = self._entries.get((account_id, key))
        if entry is None:
            return None
        if entry.is_fresh(self.ttl, self._clock()):
            logger.debug("Cache hit: memory %s/%s", account_id, key)
            return entry
        del self._entries[(account_id, key)]
        return None

    def set(self, account_id: str, key: str, data: list[DailyTaking]) -> None:
        self._entries[(account_id, key)] = CacheEntry(account_id, key, list(data), self._clock())

    def clear_account(self, account_id: str) -> None:
        for k in [k for k in self._entries if k[0] == account_id]:
            del self._entries[k]

    def clear(self) -> None:
        self._entries.clear()


class FileCache:
    """Persistent tier: one JSON document per (account, key)."""

    def __init__(
        self,
        cache_dir: Path,
        ttl: float = FILE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.cache_dir = Path(cache_dir)
        self.ttl = ttl
        self._clock = clock

    def _path(self, account_id: str, key: str) -> Path:
        return (
            self.cache_dir
            / _UNSAFE_CHARS_RE.sub("_", account_id)
            / f"{_UNSAFE_CHARS_RE.sub('_', key)}.json"
        )

    def get(self, account_id: str, key: str) -> CacheEntry | None:
        path = self._path(account_id, key)
        if not path.exists():
            return None
        try:
            entry = CacheEntry.from_json(path.read_text(encoding="utf-8"))
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Error reading cache %s: %s", path, e)
            return None
        if not entry.is_fresh(self.ttl, self._clock()):
            return None
        logger.debug("Cache hit: file %s", path)
        return entry

    def set(self, account_id: str, key: str, data: list[DailyTaking]) -> None:
        path = self._path(account_id, key)
        entry = CacheEntry(account_id, key, list(data), self._clock())
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(entry.to_json(), encoding="utf-8")
        except OSError as e:
            logger.warning("Error writing cache %s: %s", path, e)
            return
        logger.debug("Wrote cache: %s", path)

    def clear_account(self, account_id: str) -> None:
        folder = self.cache_dir / _UNSAFE_CHARS_RE.sub("_", account_id)
        if not folder.exists():
            return
        for f in folder.glob("*.json"):
            f.unlink(missing_ok=True)

    def clear(self) -> None:
        if not self.cache_dir.exists():
            return
        for f in self.cache_dir.glob("*/*.json"):
            f.unlink(missing_ok=True)


class TieredCache:
    """Memory tier in front of a file tier.

    Example:
        >>> from takings_core import DataPaths
        >>> paths = DataPaths.from_root("data", "utils/accounts.json")
        >>> cache = TieredCache.for_paths(paths)
        >>> cache.get("acc-1", "default-31d") is None
        True
    """

    def __init__(self, memory: MemoryCache, file: FileCache | None = None) -> None:
        self.memory = memory
        self.file = file

    @classmethod
    def for_paths(cls, paths: DataPaths) -> TieredCache:
        """Build the default two-tier cache under paths.cache_dir."""
        return cls(MemoryCache(), FileCache(paths.cache_dir))

    def get(self, account_id: str, key: str) -> CacheEntry | None:
        entry = self.memory.get(account_id, key)
        if entry is not None:
            return entry
        if self.file is None:
            return None
        entry = self.file.get(account_id, key)
        if entry is not None:
            self.memory.set(account_id, key, entry.data)
        return entry

    def set(self, account_id: str, key: str, data: list[DailyTaking]) -> None:
        self.memory.set(account_id, key, data)
        if self.file is not None:
            self.file.set(account_id, key, data)

    def clear_account(self, account_id: str) -> None:
        self.memory.clear_account(account_id)
        if self.file is not None:
            self.file.clear_account(account_id)

    def clear(self) -> None:
        self.memory.clear()
        if self.file is not None:
            self.file.clear()
