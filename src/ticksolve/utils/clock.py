"""
Injectable clocks and cancellable deadlines.

Components never start background timers. A delayed action is recorded as a
Deadline and applied the next time the owner is poked, so tearing the owner
down simply drops the deadline instead of leaving a timer behind.
"""

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

Clock = Callable[[], float]


def utc_now() -> datetime:
    """Timezone-aware current time used for persisted timestamps."""
    return datetime.now(timezone.utc)


@dataclass
class Deadline:
    """A single pending action due at `due_at` on the owner's clock."""

    clock: Clock = time.monotonic
    due_at: Optional[float] = None

    def schedule(self, delay_seconds: float) -> None:
        self.due_at = self.clock() + delay_seconds

    def cancel(self) -> None:
        self.due_at = None

    @property
    def pending(self) -> bool:
        return self.due_at is not None

    def expired(self) -> bool:
        """True once a scheduled deadline has passed."""
        return self.due_at is not None and self.clock() >= self.due_at

    def remaining(self) -> float:
        if self.due_at is None:
            return 0.0
        return max(0.0, self.due_at - self.clock())
