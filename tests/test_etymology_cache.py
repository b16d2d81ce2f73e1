import pytest

from etymograph.cache import EtymologyCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return EtymologyCache("test", default_ttl=60, max_size=8, timer=clock)


def test_get_and_set(cache):
    assert cache.get(("en", "water")) is None

    cache.set(("en", "water"), "result")
    assert cache.get(("en", "water")) == "result"
    assert ("en", "water") in cache


def test_entries_expire(cache, clock):
    cache.set("water", "result")

    clock.now += 59
    assert cache.get("water") == "result"

    clock.now += 2
    assert cache.get("water") is None
    assert len(cache) == 0


def test_per_entry_ttl(cache, clock):
    cache.set("short", 1, ttl=5)
    cache.set("long", 2)

    clock.now += 10
    assert cache.get("short") is None
    assert cache.get("long") == 2


def test_set_replaces(cache):
    cache.set("water", "old")
    cache.set("water", "new")
    assert cache.get("water") == "new"


def test_delete_and_flush(cache):
    cache.set("water", 1)
    cache.set("wet", 2)

    assert cache.delete("water")
    assert not cache.delete("water")

    cache.flush_all()
    assert len(cache) == 0


def test_max_size_evicts(clock):
    cache = EtymologyCache("small", default_ttl=60, max_size=2, timer=clock)
    for key in ("a", "b", "c"):
        cache.set(key, key)
    assert len(cache) == 2


def test_stats(cache):
    cache.set("water", 1)
    cache.get("water")
    cache.get("missing")

    assert cache.stats() == {
        "name": "test",
        "entries": 1,
        "max_size": 8,
        "ttl": 60,
        "hits": 1,
        "misses": 1,
    }
