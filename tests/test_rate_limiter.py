from types import SimpleNamespace

from parkshare import rate_limiter
from parkshare.rate_limiter import check_rate_limit


def test_requests_over_the_limit_are_refused():
    key = "test:limit:1.2.3.4"
    rate_limiter.memory_cache.pop(key, None)

    results = [check_rate_limit(key, limit=2, window_seconds=60)[0] for _ in range(3)]

    assert results == [True, True, False]


def test_counter_resets_after_window(monkeypatch):
    key = "test:window:1.2.3.4"
    rate_limiter.memory_cache.pop(key, None)
    clock = [1_000_000.0]
    monkeypatch.setattr(rate_limiter, "time", SimpleNamespace(time=lambda: clock[0]))

    assert check_rate_limit(key, limit=1, window_seconds=30)[0]
    assert not check_rate_limit(key, limit=1, window_seconds=30)[0]

    clock[0] += 31
    allowed, count, ttl = check_rate_limit(key, limit=1, window_seconds=30)
    assert allowed
    assert count == 1
    assert ttl == 30


def test_redis_is_skipped_without_url():
    assert rate_limiter.get_redis_client() is None
