"""
Failed-login throttle tests.

Run with: pytest tests/unit/test_login_throttle.py -v
"""

import pytest

from ticksolve.services.login_throttle import InMemoryAttemptStore, LoginThrottle
from ticksolve.utils.error_handling import RateLimitError


@pytest.fixture
def throttle(clock):
    return LoginThrottle(InMemoryAttemptStore(), max_attempts=5, lockout_seconds=60, clock=clock)


def test_locks_on_fifth_failure(throttle):
    for expected in range(1, 5):
        assert throttle.record_failure("ip") == expected
        assert not throttle.is_locked("ip")
    throttle.record_failure("ip")
    assert throttle.is_locked("ip")
    with pytest.raises(RateLimitError) as exc_info:
        throttle.check("ip")
    assert exc_info.value.retry_after_seconds == 60


def test_lockout_expires_and_counter_resets(throttle, clock):
    for _ in range(5):
        throttle.record_failure("ip")

    clock.advance(59)
    assert throttle.remaining_lockout("ip") == 1

    clock.advance(1)
    throttle.check("ip")
    assert throttle.attempts("ip") == 0


def test_keys_are_independent(throttle):
    for _ in range(5):
        throttle.record_failure("a")
    throttle.check("b")


def test_reset_clears_count(throttle):
    throttle.record_failure("ip")
    throttle.reset("ip")
    assert throttle.attempts("ip") == 0
