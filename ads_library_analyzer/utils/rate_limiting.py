"""
Spacing between outbound provider requests.

The pipeline calls its limiter once before each company. A limiter holds a
minimum interval: if the previous call was less than that long ago, the next
call sleeps for the remainder. The first call never waits.

Usage:
    limiter = RateLimiter.from_interval(5.0, source_name="ScrapingBee")
    for company in companies:
        limiter()
        fetch(company)
"""

import logging
import time
from collections.abc import Callable
from threading import Lock

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Minimum-interval limiter.

    Args:
        min_interval: Seconds that must separate two calls (must be > 0)
        source_name: Provider name used in log messages
        clock: Monotonic time source
        sleep: Sleep function
    """

    def __init__(
        self,
        min_interval: float,
        source_name: str = "default",
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if min_interval <= 0:
            raise ValueError(f"min_interval must be > 0, got {min_interval}")

        self.min_interval = min_interval
        self.source_name = source_name
        self._clock = clock
        self._sleep = sleep
        self._lock = Lock()
        self._last_call: float | None = None

    @classmethod
    def from_interval(cls, seconds: float, source_name: str = "default") -> "RateLimiter":
        """Limiter for a configured delay; 0 or less gives one that never waits."""
        if seconds <= 0:
            return NoopRateLimiter(source_name=source_name)
        return cls(seconds, source_name=source_name)

    def __call__(self) -> float:
        """Wait out the rest of the interval. Returns the seconds slept."""
        with self._lock:
            waited = 0.0
            if self._last_call is not None:
                remaining = self.min_interval - (self._clock() - self._last_call)
                if remaining > 0:
                    logger.debug(f"{self.source_name}: waiting {remaining:.1f}s")
                    self._sleep(remaining)
                    waited = remaining
            self._last_call = self._clock()
            return waited


class NoopRateLimiter(RateLimiter):
    """Limiter for a zero interval."""

    def __init__(self, source_name: str = "default"):
        self.min_interval = 0.0
        self.source_name = source_name

    def __call__(self) -> float:
        return 0.0
