"""
Shared rate limiter with token-bucket semantics and jitter.

Keeps the average request rate towards the archive polite while several
worker threads fetch posts at once.
"""

from __future__ import annotations

import threading
import time
import random


class TokenBucket:
    def __init__(self, rate_per_sec: float = 1.0, burst: int = 1, jitter_ms: int = 0):
        """
        Args:
            rate_per_sec: average tokens per second (e.g., 0.5 = 1 request every 2s)
            burst: bucket capacity
            jitter_ms: random jitter added after acquire to avoid lockstep
        """
        if rate_per_sec <= 0:
            raise ValueError("rate_per_sec must be positive")
        self.rate = rate_per_sec
        self.capacity = max(1, burst)
        self.tokens = float(self.capacity)
        self.last = time.monotonic()
        self.lock = threading.Lock()
        self.jitter_ms = jitter_ms

    @classmethod
    def from_delay(cls, delay_secs: float, jitter_ms: int = 0) -> "TokenBucket":
        """Build a bucket that releases one token every delay_secs."""
        return cls(rate_per_sec=1.0 / delay_secs, burst=1, jitter_ms=jitter_ms)

    def acquire(self) -> None:
        while True:
            with self.lock:
                now = time.monotonic()
                self.tokens = min(self.capacity, self.tokens + (now - self.last) * self.rate)
                self.last = now
                if self.tokens >= 1:
                    self.tokens -= 1
                    break
                wait = max((1 - self.tokens) / self.rate, 0.01)
            time.sleep(wait)

        if self.jitter_ms > 0:
            time.sleep(random.uniform(0, self.jitter_ms) / 1000.0)
