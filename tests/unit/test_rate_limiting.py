"""
Unit tests for the minimum-interval rate limiter.

A fake clock and sleep keep these tests independent of wall time.
"""

import threading

import pytest

from ads_library_analyzer.utils.rate_limiting import NoopRateLimiter, RateLimiter


class FakeClock:
    """Clock that only advances when sleep() is called or time is moved forward."""

    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def _limiter(clock, interval=5.0):
    return RateLimiter(interval, source_name="test", clock=clock, sleep=clock.sleep)


class TestRateLimiter:
    """Test RateLimiter class."""

    def test_init_valid(self):
        limiter = RateLimiter(5.0, source_name="ScrapingBee")
        assert limiter.min_interval == 5.0
        assert limiter.source_name == "ScrapingBee"

    @pytest.mark.parametrize("interval", [0.0, -1.0])
    def test_init_invalid(self, interval):
        with pytest.raises(ValueError, match="min_interval must be > 0"):
            RateLimiter(interval)

    def test_first_call_never_waits(self, clock):
        limiter = _limiter(clock)
        assert limiter() == 0.0
        assert clock.sleeps == []

    def test_back_to_back_calls_wait_full_interval(self, clock):
        limiter = _limiter(clock)
        limiter()
        assert limiter() == pytest.approx(5.0)
        assert clock.sleeps == [pytest.approx(5.0)]

    def test_waits_only_for_remainder(self, clock):
        limiter = _limiter(clock)
        limiter()
        clock.now += 3.0

        assert limiter() == pytest.approx(2.0)

    def test_no_wait_after_interval_elapsed(self, clock):
        limiter = _limiter(clock)
        limiter()
        clock.now += 7.5

        assert limiter() == 0.0
        assert clock.sleeps == []

    def test_calls_are_spaced_across_a_batch(self, clock):
        limiter = _limiter(clock, interval=2.0)
        start = clock.now
        for _ in range(4):
            limiter()
        assert clock.now - start == pytest.approx(6.0)

    def test_thread_safe(self, clock):
        limiter = _limiter(clock, interval=1.0)
        threads = [threading.Thread(target=limiter) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5.0)

        # Serialized calls: nine waits of one second each after the first call
        assert len(clock.sleeps) == 9
        assert sum(clock.sleeps) == pytest.approx(9.0)


class TestFromInterval:
    """Test RateLimiter.from_interval."""

    def test_positive_interval(self):
        limiter = RateLimiter.from_interval(5.0, source_name="ScrapingBee")
        assert type(limiter) is RateLimiter
        assert limiter.min_interval == 5.0
        assert limiter.source_name == "ScrapingBee"

    @pytest.mark.parametrize("seconds", [0, -1.0])
    def test_zero_interval_never_waits(self, seconds):
        limiter = RateLimiter.from_interval(seconds, source_name="test")
        assert isinstance(limiter, NoopRateLimiter)
        assert limiter.min_interval == 0.0
        assert all(limiter() == 0.0 for _ in range(50))
