import re
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from clubhub.config import config
from clubhub.utils.logging import logger

T = TypeVar("T")

CACHE_TTL_SHORT_S = 30
CACHE_TTL_MEDIUM_S = 60
CACHE_TTL_LONG_S = 300
CACHE_TTL_VERY_LONG_S = 600


@dataclass
class _CacheEntry:
    value: Any
    expires_at: float


class TTLCache:
    """
    Process-local key/value store where every entry expires after its own time-to-live.

    Entries are only dropped on expiry (or explicitly), writes elsewhere in the application do
    not invalidate them, so readers can observe data that is up to one TTL old.

    The store holds at most `max_entries` keys. When full, expired entries are swept first and
    the oldest remaining entries are evicted after that.
    """

    def __init__(
        self, max_entries: int = 1_000, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self._entries: dict[str, _CacheEntry] = {}
        self._max_entries = max_entries
        self._clock = clock

    def set(self, key: str, value: Any, ttl_s: float = CACHE_TTL_MEDIUM_S) -> None:
        self._entries.pop(key, None)
        if len(self._entries) >= self._max_entries:
            self.purge_expired()

        while len(self._entries) >= self._max_entries:
            del self._entries[next(iter(self._entries))]

        self._entries[key] = _CacheEntry(value=value, expires_at=self._clock() + ttl_s)

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() > entry.expires_at:
            del self._entries[key]
            return None

        return entry.value

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def purge_expired(self) -> int:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now > entry.expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def invalidate_pattern(self, pattern: str) -> int:
        regex = re.compile(pattern)
        keys_to_delete = [key for key in self._entries if regex.search(key)]
        for key in keys_to_delete:
            del self._entries[key]
        return len(keys_to_delete)

    def __len__(self) -> int:
        return len(self._entries)


cache = TTLCache(max_entries=config.cache_max_entries)


class CacheKeys:
    @staticmethod
    def club(club_id: int) -> str:
        return f"club:{club_id}"

    @staticmethod
    def clubs() -> str:
        return "clubs:all"

    @staticmethod
    def player(player_id: int) -> str:
        return f"player:{player_id}"

    @staticmethod
    def players(**filters: object) -> str:
        suffix = ":".join(f"{name}={value}" for name, value in sorted(filters.items()))
        return f"players:{suffix}"

    @staticmethod
    def tournament(tournament_id: int) -> str:
        return f"tournament:{tournament_id}"

    @staticmethod
    def tournaments(**filters: object) -> str:
        suffix = ":".join(f"{name}={value}" for name, value in sorted(filters.items()))
        return f"tournaments:{suffix}"

    @staticmethod
    def tournament_matches(tournament_id: int) -> str:
        return f"tournament:{tournament_id}:matches"

    @staticmethod
    def tournament_leaderboard(tournament_id: int) -> str:
        return f"tournament:{tournament_id}:leaderboard"

    @staticmethod
    def match(match_id: int) -> str:
        return f"match:{match_id}"

    @staticmethod
    def player_leaderboard(tournament_id: int | None) -> str:
        return f"leaderboard:players:{tournament_id or 'all'}"

    @staticmethod
    def team_leaderboard(tournament_id: int | None) -> str:
        return f"leaderboard:teams:{tournament_id or 'all'}"


async def cached(key: str, ttl_s: float, loader: Callable[[], Awaitable[T]]) -> T:
    if not config.cache_enabled:
        return await loader()

    hit = cache.get(key)
    if hit is not None:
        return hit  # type: ignore[no-any-return]

    logger.debug("Cache miss: %s", key)
    value = await loader()
    if value is not None:
        cache.set(key, value, ttl_s)
    return value
