"""Fixed-window, per-client request limiter.

Each client key (the caller's IP address) owns a counter and a reset
instant.  The first request of a window creates the entry with count 1;
later requests in the same window increment it until ``max_requests`` is
reached, after which requests are rejected without further counting.
Once the reset instant has passed the entry is overwritten with a fresh
window.

Because windows are fixed rather than sliding, a client can send up to
``2 * max_requests`` requests around a window boundary.

Thread safety: the read-modify-write of an entry is guarded by ``_lock``.
State is in-memory and per-process; expired entries are swept once the
number of tracked keys passes ``sweep_threshold``.
"""
import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from fastapi import Depends, Request

from gateway.config import RateLimitSettings, get_config
from gateway.request_log import client_ip

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests. Please try again later."


class RateLimitExceeded(Exception):
    """Raised when a client has used up its window."""

    def __init__(self, key: str, retry_after: int):
        self.key = key
        self.retry_after = retry_after
        super().__init__(RATE_LIMIT_MESSAGE)


@dataclass
class RateWindowEntry:
    count: int
    reset_at: float


class RateLimiter:
    """Fixed-window request counter keyed by client identity.

    Args:
        max_requests: Requests allowed per window.
        window_seconds: Window length.
        clock: Returns the current time in seconds; injectable for tests.
        sweep_threshold: Tracked-key count that triggers an expiry sweep.
    """

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: float = 15 * 60,
        clock: Callable[[], float] = time.time,
        sweep_threshold: int = 10_000,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.sweep_threshold = sweep_threshold
        self._clock = clock
        self._entries: Dict[str, RateWindowEntry] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: RateLimitSettings, clock: Callable[[], float] = time.time) -> "RateLimiter":
        return cls(
            max_requests=settings.max_requests,
            window_seconds=settings.window_seconds,
            clock=clock,
            sweep_threshold=settings.sweep_threshold,
        )

    def hit(self, key: str) -> bool:
        """Record a request for *key*; return False when it must be rejected."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or now >= entry.reset_at:
                if entry is None and len(self._entries) >= self.sweep_threshold:
                    self._sweep_locked(now)
                self._entries[key] = RateWindowEntry(count=1, reset_at=now + self.window_seconds)
                return True

            if entry.count >= self.max_requests:
                return False

            entry.count += 1
            return True

    def check(self, key: str) -> None:
        """Like :meth:`hit` but raise :class:`RateLimitExceeded` on rejection."""
        if not self.hit(key):
            retry_after = self.retry_after(key)
            logger.warning("Rate limit exceeded for %s (retry in %ss)", key, retry_after)
            raise RateLimitExceeded(key, retry_after)

    def retry_after(self, key: str) -> int:
        """Whole seconds until *key*'s window resets (0 when untracked)."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return 0
            return max(0, math.ceil(entry.reset_at - self._clock()))

    def get_entry(self, key: str) -> Optional[RateWindowEntry]:
        with self._lock:
            entry = self._entries.get(key)
            return RateWindowEntry(entry.count, entry.reset_at) if entry else None

    def sweep(self) -> int:
        """Drop entries whose window has ended; return how many were removed."""
        with self._lock:
            return self._sweep_locked(self._clock())

    def _sweep_locked(self, now: float) -> int:
        expired = [key for key, entry in self._entries.items() if now >= entry.reset_at]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Swept %d expired rate-limit entries", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_limiter: Optional[RateLimiter] = None


def get_rate_limiter() -> RateLimiter:
    """Return the process-wide limiter, built from config on first use."""
    global _limiter
    if _limiter is None:
        _limiter = RateLimiter.from_settings(get_config().rate_limit)
    return _limiter


def set_rate_limiter(limiter: Optional[RateLimiter]) -> None:
    """Replace (or clear) the process-wide limiter."""
    global _limiter
    _limiter = limiter


async def enforce_rate_limit(request: Request, limiter: RateLimiter = Depends(get_rate_limiter)) -> None:
    """FastAPI dependency counting *request* against its client's window."""
    limiter.check(client_ip(request))
