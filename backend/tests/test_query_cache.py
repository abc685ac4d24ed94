import time

from app.services.query_cache import QueryCache

LIST = "/api/list-doctor-with-filter"


def test_key_ignores_parameter_order():
    a = QueryCache.make_key(LIST, {"specialty": "cardiology", "city": "Pune"})
    b = QueryCache.make_key(LIST, [("city", "Pune"), ("specialty", "cardiology")])
    assert a == b
    assert a != QueryCache.make_key(LIST, {"specialty": "cardiology"})


def test_get_set_and_last_write_wins():
    cache = QueryCache(ttl=60)
    key = QueryCache.make_key(LIST, {"city": "Pune"})
    assert cache.get(key) is None
    cache.set(key, ["first"])
    cache.set(key, ["second"])
    assert cache.get(key) == ["second"]
    assert len(cache) == 1


def test_entries_expire(monkeypatch):
    cache = QueryCache(ttl=10)
    key = QueryCache.make_key(LIST)
    now = time.monotonic()
    monkeypatch.setattr("app.services.query_cache.time.monotonic", lambda: now)
    cache.set(key, [])
    monkeypatch.setattr("app.services.query_cache.time.monotonic", lambda: now + 11)
    assert cache.get(key) is None
    assert len(cache) == 0


def test_oldest_entry_evicted_when_full():
    cache = QueryCache(ttl=60, max_entries=2)
    k1, k2, k3 = (QueryCache.make_key(LIST, {"page": n}) for n in (1, 2, 3))
    cache.set(k1, 1)
    cache.set(k2, 2)
    cache.get(k1)  # k1 becomes most recent
    cache.set(k3, 3)
    assert k1 in cache
    assert k2 not in cache
    assert k3 in cache


def test_invalidate_drops_only_that_query_family():
    cache = QueryCache(ttl=60)
    cache.set(QueryCache.make_key(LIST, {"city": "Pune"}), [1])
    cache.set(QueryCache.make_key(LIST, {"city": "Delhi"}), [2])
    other = QueryCache.make_key("/api/specialties")
    cache.set(other, ["Cardiology"])

    assert cache.invalidate(LIST) == 2
    assert len(cache) == 1
    assert cache.get(other) == ["Cardiology"]
    assert cache.invalidate(LIST) == 0
