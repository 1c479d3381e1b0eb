"""Unit tests for the in-memory SimpleTTLCache."""

import threading

from restaurant_picker.utils.simple_cache import SimpleTTLCache


class FakeClock:
    """Deterministic clock used to test expiration logic."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


def test_set_and_get() -> None:
    cache = SimpleTTLCache(ttl_seconds=10)

    assert cache.get("missing") is None

    cache.set("document", {"restaurants": [], "profiles": []})

    assert cache.get("document") == {"restaurants": [], "profiles": []}
    assert len(cache) == 1


def test_values_are_copied_in_and_out() -> None:
    cache = SimpleTTLCache(ttl_seconds=10)
    document = {"restaurants": [{"id": 1}]}

    cache.set("document", document)
    document["restaurants"].clear()
    first = cache.get("document")
    first["restaurants"].append({"id": 2})

    assert cache.get("document") == {"restaurants": [{"id": 1}]}


def test_expired_entry_is_evicted() -> None:
    clock = FakeClock()
    cache = SimpleTTLCache(ttl_seconds=5, clock=clock)
    cache.set("key", {"data": True})

    clock.advance(4.9)
    assert cache.get("key") == {"data": True}

    clock.advance(0.1)
    assert cache.get("key") is None
    assert len(cache) == 0


def test_zero_ttl_disables_cache() -> None:
    cache = SimpleTTLCache(ttl_seconds=0)

    cache.set("key", {"v": 1})

    assert cache.enabled is False
    assert cache.get("key") is None


def test_lru_eviction_removes_least_recently_used() -> None:
    cache = SimpleTTLCache(ttl_seconds=100, max_entries=2)
    cache.set("a", {"v": 1})
    cache.set("b", {"v": 2})

    # Access "a" so that "b" becomes least recently used
    assert cache.get("a") == {"v": 1}

    cache.set("c", {"v": 3})

    assert cache.get("a") == {"v": 1}
    assert cache.get("c") == {"v": 3}
    assert cache.get("b") is None


def test_clear_drops_entries() -> None:
    cache = SimpleTTLCache(ttl_seconds=10)
    cache.set("a", {"v": 1})
    cache.set("b", {"v": 2})

    cache.clear()

    assert len(cache) == 0
    assert cache.get("a") is None


def test_thread_safety_under_concurrent_sets() -> None:
    cache = SimpleTTLCache(ttl_seconds=30, max_entries=None)
    total_keys = 50

    def _writer(idx: int) -> None:
        cache.set(f"k-{idx}", {"v": idx})

    threads = [threading.Thread(target=_writer, args=(i,)) for i in range(total_keys)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(cache) == total_keys
    assert cache.get("k-0") == {"v": 0}
    assert cache.get("k-49") == {"v": 49}
