"""
Pytest configuration shared by the unit tests.

Adds src/ to sys.path so the tests run from a plain checkout as well as an
editable install, and pins offline-friendly environment defaults.
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest


def _ensure_paths_on_sys_path() -> None:
    """Add repository root AND src/ to sys.path if missing."""
    repo_root = Path(__file__).resolve().parents[1]
    for path in (repo_root, repo_root / "src"):
        path_str = str(path)
        if path_str not in sys.path:
            sys.path.insert(0, path_str)


_ensure_paths_on_sys_path()

# Ensure boto3 has offline-friendly defaults so tests do not require AWS access.
os.environ.setdefault("AWS_REGION", "eu-west-2")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("ENVIRONMENT", "dev")

# Handler configuration: in-memory storage and cheap bcrypt rounds.
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.pop("DATABASE_URL", None)
os.environ.pop("DB_SECRET_ARN", None)

from ticksolve.models.ticket import StatusChange, Ticket  # noqa: E402


class FakeClock:
    """Manually advanced clock usable wherever a time source is injected."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_ticket(
    ticket_id: str,
    status: str = "open",
    created: str = "2023-05-01",
    title: str = "Sample complaint",
    description: str = "",
    category: str = "other",
    student_id: str = "S12345",
) -> Ticket:
    """Build a valid ticket whose history ends at `status`."""
    created_at = datetime.fromisoformat(created).replace(tzinfo=timezone.utc)
    history = [StatusChange(status="open", timestamp=created_at)]
    if status != "open":
        history.append(StatusChange(status=status, timestamp=created_at))
    return Ticket(
        id=ticket_id,
        student_id=student_id,
        title=title,
        category=category,
        description=description,
        status=status,
        created_at=created_at,
        updated_at=created_at,
        status_history=history,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def example_tickets():
    """The three tickets used in the board examples."""
    return [
        make_ticket("T1", status="open", created="2023-05-01"),
        make_ticket("T2", status="resolved", created="2023-05-10"),
        make_ticket("T3", status="open", created="2023-05-01"),
    ]


@pytest.fixture
def ticket_service():
    from ticksolve.repositories.memory_repo import InMemoryTicketRepository
    from ticksolve.services.ticket_service import TicketService

    return TicketService(InMemoryTicketRepository())


@pytest.fixture
def ticket_factory():
    return make_ticket
