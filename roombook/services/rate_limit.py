"""
Per-identity attempt counters with a fixed window.

The in-memory store is process-local and forgets everything on restart, which
is acceptable: rate limiting here is abuse prevention, not a correctness rule.
Swap in another ``RateLimitStore`` to share state between processes.
"""

import logging
import math
import threading
import time

from roombook.types import RateLimitStatus

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_WINDOW_SECONDS = 15 * 60


class RateLimitStore:
    """Interface for attempt counters keyed by identity (e.g. ``otp_request:<email>``)."""

    def check(self, key) -> RateLimitStatus:
        raise NotImplementedError

    def record(self, key) -> None:
        raise NotImplementedError

    def hit(self, key) -> RateLimitStatus:
        """Check and, when not limited, record one attempt as a single step."""
        raise NotImplementedError

    def clear(self, key) -> None:
        raise NotImplementedError

    def cleanup_expired(self) -> int:
        raise NotImplementedError


class InMemoryRateLimitStore(RateLimitStore):

    def __init__(self, max_attempts=DEFAULT_MAX_ATTEMPTS, window_seconds=DEFAULT_WINDOW_SECONDS, clock=None):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._clock = clock
        self._entries = {}  # key -> [attempts, first_attempt]
        self._lock = threading.Lock()

    def _now(self):
        return self._clock() if self._clock else time.time()

    def _expired(self, entry, now):
        return now - entry[1] > self.window_seconds

    def check(self, key):
        now = self._now()
        with self._lock:
            return self._status(key, now)

    def _status(self, key, now):
        # Caller holds self._lock
        entry = self._entries.get(key)
        if entry is None:
            return RateLimitStatus(limited=False, remaining_attempts=self.max_attempts, reset_in=0)

        if self._expired(entry, now):
            del self._entries[key]
            return RateLimitStatus(limited=False, remaining_attempts=self.max_attempts, reset_in=0)

        attempts, first_attempt = entry
        reset_in = max(1, math.ceil(first_attempt + self.window_seconds - now))
        return RateLimitStatus(
            limited=attempts >= self.max_attempts,
            remaining_attempts=max(0, self.max_attempts - attempts),
            reset_in=reset_in
        )

    def record(self, key):
        now = self._now()
        with self._lock:
            self._record(key, now)

    def hit(self, key):
        now = self._now()
        with self._lock:
            status = self._status(key, now)
            if not status.limited:
                self._record(key, now)
                status.remaining_attempts = max(0, status.remaining_attempts - 1)
            return status

    def _record(self, key, now):
        entry = self._entries.get(key)
        if entry is None or self._expired(entry, now):
            self._entries[key] = [1, now]
        else:
            entry[0] += 1

    def clear(self, key):
        with self._lock:
            self._entries.pop(key, None)

    def cleanup_expired(self):
        now = self._now()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if self._expired(entry, now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Evicted %d expired rate-limit entries", len(expired))
        return len(expired)
