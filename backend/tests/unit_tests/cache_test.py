import pytest

from clubhub.utils import cache as cache_module
from clubhub.utils.cache import CacheKeys, TTLCache, cached


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_entries_expire_after_ttl() -> None:
    clock = _Clock()
    store = TTLCache(clock=clock)

    store.set("club:1", {"name": "Riverside"}, ttl_s=30)
    clock.now += 29
    assert store.get("club:1") == {"name": "Riverside"}
    assert store.has("club:1")

    clock.now += 2
    assert store.get("club:1") is None
    assert len(store) == 0


def test_expired_entries_are_swept_when_full() -> None:
    clock = _Clock()
    store = TTLCache(max_entries=3, clock=clock)

    for search in ("al", "ale", "alex"):
        store.set(CacheKeys.players(search=search), [], ttl_s=30)
    clock.now += 31

    store.set(CacheKeys.players(search="b"), [], ttl_s=30)

    assert len(store) == 1
    assert store.get(CacheKeys.players(search="b")) == []


def test_oldest_entries_are_evicted_at_capacity() -> None:
    clock = _Clock()
    store = TTLCache(max_entries=2, clock=clock)

    store.set("a", 1)
    store.set("b", 2)
    store.set("a", 3)
    store.set("c", 4)

    assert len(store) == 2
    assert store.get("b") is None
    assert (store.get("a"), store.get("c")) == (3, 4)


def test_purge_expired() -> None:
    clock = _Clock()
    store = TTLCache(clock=clock)
    store.set("short", 1, ttl_s=10)
    store.set("long", 2, ttl_s=100)

    clock.now += 11

    assert store.purge_expired() == 1
    assert len(store) == 1


def test_delete_clear_and_invalidate_pattern() -> None:
    store = TTLCache()
    store.set(CacheKeys.tournament(1), "a")
    store.set(CacheKeys.tournament_matches(1), "b")
    store.set(CacheKeys.tournament(2), "c")
    store.set(CacheKeys.club(1), "d")

    assert store.invalidate_pattern(r"^tournament:1(:|$)") == 2
    assert store.get(CacheKeys.tournament(2)) == "c"

    store.delete(CacheKeys.club(1))
    assert not store.has(CacheKeys.club(1))

    store.clear()
    assert len(store) == 0


def test_cache_keys() -> None:
    assert CacheKeys.clubs() == "clubs:all"
    assert CacheKeys.player_leaderboard(None) == "leaderboard:players:all"
    assert CacheKeys.team_leaderboard(3) == "leaderboard:teams:3"
    assert CacheKeys.players(search="al", club_id=1) == CacheKeys.players(club_id=1, search="al")


@pytest.mark.asyncio
async def test_cached_loads_once_when_enabled(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = {"load": 0}

    async def load() -> str:
        calls["load"] += 1
        return "value"

    monkeypatch.setattr(cache_module.config, "cache_enabled", True)
    monkeypatch.setattr(cache_module, "cache", TTLCache())

    assert await cached("key", 60, load) == "value"
    assert await cached("key", 60, load) == "value"
    assert calls["load"] == 1


@pytest.mark.asyncio
async def test_cached_skips_missing_values(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = {"load": 0}

    async def load() -> None:
        calls["load"] += 1

    monkeypatch.setattr(cache_module.config, "cache_enabled", True)
    monkeypatch.setattr(cache_module, "cache", TTLCache())

    assert await cached("missing", 60, load) is None
    assert await cached("missing", 60, load) is None
    assert calls["load"] == 2


@pytest.mark.asyncio
async def test_cached_bypasses_store_when_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    store = TTLCache()

    async def load() -> int:
        return 42

    monkeypatch.setattr(cache_module.config, "cache_enabled", False)
    monkeypatch.setattr(cache_module, "cache", store)

    assert await cached("key", 60, load) == 42
    assert len(store) == 0
