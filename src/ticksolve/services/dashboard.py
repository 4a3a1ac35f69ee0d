"""
Student dashboard session.

Ties the wizard and the ticket list together: a confirmed submission is
persisted through the gateway, then the list is reloaded so the new ticket
shows up in the board's view.
"""

from __future__ import annotations

import time
from typing import List, Optional

from ticksolve.clients.gateway import TicketGateway
from ticksolve.models.auth import Student
from ticksolve.models.ticket import Comment, Ticket
from ticksolve.services.board import TicketBoard
from ticksolve.services.composer import TicketComposer
from ticksolve.utils.clock import Clock
from ticksolve.utils.error_handling import AppError
from ticksolve.utils.logging_config import get_logger

logger = get_logger(__name__)


class Dashboard:
    """One logged-in student's view: profile, ticket board and intake wizard."""

    def __init__(
        self,
        student: Student,
        gateway: TicketGateway,
        success_display_seconds: float = 2.0,
        clock: Clock = time.monotonic,
    ):
        self.student = student
        self.gateway = gateway
        self.board = TicketBoard()
        self.error: Optional[str] = None
        self.composer_open = False
        self.composer = TicketComposer(
            gateway,
            on_submitted=self._on_submitted,
            on_close=self._on_composer_closed,
            success_display_seconds=success_display_seconds,
            clock=clock,
        )

    def open_composer(self) -> TicketComposer:
        self.composer_open = True
        return self.composer

    def _on_composer_closed(self) -> None:
        self.composer_open = False

    def _on_submitted(self, ticket: Ticket) -> None:
        self.refresh()

    def refresh(self) -> bool:
        """Reload the board; on failure keep the previous list and record the message."""
        try:
            tickets: List[Ticket] = self.gateway.list_tickets()
        except AppError as exc:
            # An expired session or a network failure both leave the old list in place.
            self.error = exc.message
            logger.warning(
                "Ticket refresh failed",
                extra={"student_id": self.student.student_id, "error": exc.message},
            )
            return False
        self.board.set_tickets(tickets)
        self.error = None
        return True

    def open_ticket(self, ticket_id: str) -> Optional[Ticket]:
        return self.board.select(ticket_id)

    def add_comment(self, ticket_id: str, content: str) -> Optional[Comment]:
        """Post a comment through the gateway and reload so the detail view shows it."""
        if not isinstance(content, str) or not content.strip():
            self.error = "Please enter a comment."
            return None
        try:
            comment = self.gateway.add_comment(ticket_id, content)
        except AppError as exc:
            # ValidationError and NotFoundError land here as well as network failures.
            self.error = exc.message
            return None
        self.refresh()
        self.board.select(ticket_id)
        return comment

    def dismiss_error(self) -> None:
        self.error = None

    def close(self) -> None:
        self.composer.close()
