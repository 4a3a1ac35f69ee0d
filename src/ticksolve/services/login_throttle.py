"""
Failed-login throttling.

A key accumulates failed attempts; reaching `max_attempts` locks it for
`lockout_seconds`, after which the counter starts again from zero. Expiry is
evaluated lazily on the next check, so there is no timer to outlive its owner.
"""

from __future__ import annotations

import math
import time
from threading import Lock
from typing import Dict, Protocol

from ticksolve.models.auth import AttemptRecord
from ticksolve.utils.clock import Clock
from ticksolve.utils.error_handling import RateLimitError
from ticksolve.utils.logging_config import get_logger

logger = get_logger(__name__)

LOCKED_MESSAGE = "Too many login attempts. Please try again later."


class AttemptStore(Protocol):
    def get(self, key: str) -> AttemptRecord:
        ...

    def save(self, key: str, record: AttemptRecord, now: float) -> None:
        ...


class InMemoryAttemptStore:
    """Process-local attempt counters."""

    def __init__(self) -> None:
        self._records: Dict[str, AttemptRecord] = {}
        self._lock = Lock()

    def get(self, key: str) -> AttemptRecord:
        with self._lock:
            return self._records.get(key, AttemptRecord()).model_copy()

    def save(self, key: str, record: AttemptRecord, now: float) -> None:
        with self._lock:
            self._records[key] = record.model_copy()


class LoginThrottle:
    """Counts failed logins per key and enforces a fixed cooldown."""

    def __init__(
        self,
        store: AttemptStore,
        max_attempts: int = 5,
        lockout_seconds: int = 60,
        clock: Clock = time.time,
    ):
        self.store = store
        self.max_attempts = max_attempts
        self.lockout_seconds = lockout_seconds
        self.clock = clock

    def _current(self, key: str) -> AttemptRecord:
        """Load the record, clearing a lockout that has run out."""
        record = self.store.get(key)
        now = self.clock()
        if record.locked_until is not None and now >= record.locked_until:
            record = AttemptRecord()
            self.store.save(key, record, now)
            logger.info("Login lockout expired", extra={"throttle_key": key})
        return record

    def remaining_lockout(self, key: str) -> int:
        """Whole seconds left on the lockout, 0 when not locked."""
        record = self._current(key)
        if record.locked_until is None:
            return 0
        return max(1, math.ceil(record.locked_until - self.clock()))

    def attempts(self, key: str) -> int:
        return self._current(key).count

    def check(self, key: str) -> None:
        """Raise RateLimitError while the key is locked out."""
        remaining = self.remaining_lockout(key)
        if remaining:
            raise RateLimitError(LOCKED_MESSAGE, retry_after_seconds=remaining)

    def record_failure(self, key: str) -> int:
        """Count a failed attempt, locking the key when the limit is reached."""
        record = self._current(key)
        now = self.clock()
        record.count += 1
        if record.count >= self.max_attempts:
            record.locked_until = now + self.lockout_seconds
            logger.warning(
                "Login locked out",
                extra={"throttle_key": key, "attempts": record.count},
            )
        self.store.save(key, record, now)
        return record.count

    def is_locked(self, key: str) -> bool:
        return self.remaining_lockout(key) > 0

    def reset(self, key: str) -> None:
        self.store.save(key, AttemptRecord(), self.clock())
