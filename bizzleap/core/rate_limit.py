"""
In-process rate limiting.

Token bucket per key: each bucket holds up to ``limit`` tokens and
refills at ``limit / window_seconds`` tokens per second. State lives in
this process only, so each worker enforces its own budget.
"""

import datetime
import logging
import math
import threading
from dataclasses import dataclass
from typing import Dict, Tuple

from bizzleap.core.clock import Clock, utcnow

logger = logging.getLogger(__name__)

# Buckets that have refilled completely are dropped once this many keys exist
PRUNE_THRESHOLD = 10_000


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    retry_after: int


class RateLimiter:
    """Token-bucket limiter keyed by caller."""

    def __init__(self, limit: int, window_seconds: int, clock: Clock = utcnow):
        """
        Args:
            limit: Requests allowed per window; zero or less disables limiting
            window_seconds: Length of the window
            clock: Source of "now"
        """
        if window_seconds <= 0:
            logger.warning("Invalid rate limit window %s; defaulting to 60 seconds", window_seconds)
            window_seconds = 60
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock
        self._buckets: Dict[str, Tuple[float, datetime.datetime]] = {}
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.limit > 0

    def hit(self, key: str) -> RateLimitResult:
        """Spend one token from ``key``'s bucket."""
        if not self.enabled:
            return RateLimitResult(allowed=True, remaining=self.limit, retry_after=0)

        now = self.clock()
        with self._lock:
            tokens, last_ts = self._buckets.get(key, (float(self.limit), now))
            elapsed = max(0.0, (now - last_ts).total_seconds())
            tokens = min(float(self.limit), tokens + elapsed * self.limit / self.window_seconds)
            allowed = tokens >= 1
            if allowed:
                tokens -= 1
            self._buckets[key] = (tokens, now)
            if len(self._buckets) > PRUNE_THRESHOLD:
                self._prune(now)

        retry_after = 0 if allowed else math.ceil((1 - tokens) * self.window_seconds / self.limit)
        return RateLimitResult(allowed=allowed, remaining=int(tokens), retry_after=retry_after)

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()

    def _prune(self, now: datetime.datetime) -> None:
        full = [key for key, (tokens, last_ts) in self._buckets.items()
                if tokens + (now - last_ts).total_seconds() * self.limit / self.window_seconds >= self.limit]
        for key in full:
            del self._buckets[key]
