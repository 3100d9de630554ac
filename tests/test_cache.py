import threading
import time

import pytest

from lotterymaster.cache import MISS


def test_miss_when_absent(cache):
    assert cache.get("nope") is MISS
    assert not MISS


def test_ttl_boundary(cache, clock):
    cache.put("k", {"v": 1})
    clock.now = 59.999
    assert cache.get("k") == {"v": 1}
    clock.now = 60.0
    assert cache.get("k") is MISS
    clock.now = 60.001
    assert cache.get("k") is MISS


def test_put_replaces_and_clear_empties(cache):
    cache.put("k", 1)
    cache.put("k", 2)
    assert cache.get("k") == 2
    assert len(cache) == 1
    cache.clear()
    assert cache.get("k") is MISS


def test_get_or_compute_memoises(cache):
    calls = []

    def compute():
        calls.append(1)
        return "payload"

    assert cache.get_or_compute("k", compute) == "payload"
    assert cache.get_or_compute("k", compute) == "payload"
    assert len(calls) == 1


def test_get_or_compute_recomputes_after_expiry(cache, clock):
    values = iter(["first", "second"])
    assert cache.get_or_compute("k", lambda: next(values)) == "first"
    clock.advance(60)
    assert cache.get_or_compute("k", lambda: next(values)) == "second"


def test_failures_are_not_cached(cache):
    def boom():
        raise RuntimeError("provider down")

    with pytest.raises(RuntimeError):
        cache.get_or_compute("k", boom)
    assert cache.get("k") is MISS
    assert cache.get_or_compute("k", lambda: "ok") == "ok"


def test_uncacheable_payloads_are_returned_but_not_stored(cache):
    result = cache.get_or_compute("k", lambda: {"fallback": True},
                                  cacheable=lambda r: not r["fallback"])
    assert result == {"fallback": True}
    assert cache.get("k") is MISS


def test_raising_cacheable_releases_the_key(cache):
    def broken_predicate(payload):
        raise KeyError("fallback")

    with pytest.raises(KeyError):
        cache.get_or_compute("k", lambda: {"x": 1}, cacheable=broken_predicate)

    assert cache._pending == {}
    assert cache.get("k") is MISS
    assert cache.get_or_compute("k", lambda: "recomputed") == "recomputed"


def test_single_flight(cache):
    started = threading.Event()
    release = threading.Event()
    calls = []
    results = []

    def compute():
        calls.append(1)
        started.set()
        release.wait(5)
        return "shared"

    def worker():
        results.append(cache.get_or_compute("k", compute))

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for t in threads:
        t.start()
    assert started.wait(5)
    time.sleep(0.1)
    release.set()
    for t in threads:
        t.join(5)

    assert len(calls) == 1
    assert results == ["shared"] * 5


def test_single_flight_propagates_failure_to_waiters(cache):
    started = threading.Event()
    release = threading.Event()
    errors = []

    def compute():
        started.set()
        release.wait(5)
        raise ValueError("bad reply")

    def worker():
        try:
            cache.get_or_compute("k", compute)
        except ValueError as exc:
            errors.append(str(exc))

    threads = [threading.Thread(target=worker) for _ in range(3)]
    for t in threads:
        t.start()
    assert started.wait(5)
    time.sleep(0.1)
    release.set()
    for t in threads:
        t.join(5)

    assert errors == ["bad reply"] * 3
