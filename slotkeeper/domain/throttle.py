"""
Attempt throttling for sensitive client actions (login, booking, forms).

This is a best-effort, in-process deterrent. It keeps no state across
restarts or processes and must always be paired with an equivalent or
stricter limit enforced by the backend.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThrottleConfig:
    """Limits for one throttle key. All durations are in milliseconds."""
    max_attempts: int
    window_ms: int
    block_duration_ms: Optional[int] = None


@dataclass
class ThrottleRecord:
    """Attempt bookkeeping for one key, timestamps in epoch milliseconds."""
    key: str
    count: int
    window_start: int
    blocked_until: Optional[int] = None


THROTTLE_LIMITS: Dict[str, ThrottleConfig] = {
    "login": ThrottleConfig(
        max_attempts=5,
        window_ms=5 * 60 * 1000,
        block_duration_ms=15 * 60 * 1000,
    ),
    "booking": ThrottleConfig(
        max_attempts=3,
        window_ms=60 * 1000,
        block_duration_ms=5 * 60 * 1000,
    ),
    "service_creation": ThrottleConfig(
        max_attempts=10,
        window_ms=60 * 1000,
    ),
}


class AttemptThrottle:
    """
    Counts attempts per key inside a rolling window and blocks on overflow.

    Per key: unseen -> counting -> (counting again after the window rolls
    over | blocked once the cap is exceeded). Stale windows and elapsed
    blocks are only noticed on the next ``check``; nothing is swept.

    One lock guards the whole table, since ``check`` is a read-modify-write.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        """
        Args:
            clock: Returns the current time in seconds since the epoch
        """
        self._clock = clock
        self._records: Dict[str, ThrottleRecord] = {}
        self._lock = threading.Lock()

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def check(self, key: str, config: ThrottleConfig) -> bool:
        """
        Register an attempt for ``key`` and tell whether it is allowed.

        Returns:
            False while blocked or once the cap is reached, True otherwise
        """
        now = self._now_ms()

        with self._lock:
            record = self._records.get(key)

            if record is not None and record.blocked_until is not None and now < record.blocked_until:
                return False

            if record is None or now - record.window_start > config.window_ms:
                self._records[key] = ThrottleRecord(key=key, count=1, window_start=now)
                return True

            if record.count < config.max_attempts:
                record.count += 1
                return True

            if config.block_duration_ms:
                record.blocked_until = now + config.block_duration_ms
                logger.warning(
                    "Throttle key %r blocked for %d s after %d attempts",
                    key,
                    config.block_duration_ms // 1000,
                    record.count,
                )
            return False

    def get_blocked_remaining_seconds(self, key: str) -> int:
        """Seconds until ``key`` is unblocked, rounded up; 0 if not blocked."""
        record = self._records.get(key)
        if record is None or record.blocked_until is None:
            return 0

        remaining = max(0, record.blocked_until - self._now_ms())
        return math.ceil(remaining / 1000)

    def reset(self, key: str) -> None:
        """Forget ``key`` entirely, e.g. after a successful login."""
        with self._lock:
            self._records.pop(key, None)

    def clear_all(self) -> None:
        with self._lock:
            self._records.clear()

    def get_record(self, key: str) -> ThrottleRecord | None:
        """Return a copy of the record for ``key``, if any."""
        record = self._records.get(key)
        return replace(record) if record is not None else None


# Process-wide throttle shared by the whole client session
attempt_throttle = AttemptThrottle()
