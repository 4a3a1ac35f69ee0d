"""Storage interfaces the services depend on."""

from typing import List, Optional, Protocol

from ticksolve.models.auth import StudentRecord
from ticksolve.models.ticket import Ticket


class TicketRepository(Protocol):
    """Ticket storage keyed by owning student and ticket id."""

    def create(self, ticket: Ticket) -> None:
        """Insert a new ticket; an id that already exists is rejected."""

    def save(self, ticket: Ticket) -> None:
        """Overwrite an existing ticket."""

    def get(self, student_id: str, ticket_id: str) -> Optional[Ticket]:
        ...

    def list_for_student(self, student_id: str) -> List[Ticket]:
        """Return the student's tickets in creation order."""


class StudentRepository(Protocol):
    """Lookup of student credentials."""

    def find(self, student_id: str) -> Optional[StudentRecord]:
        ...
