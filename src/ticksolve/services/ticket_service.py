"""Ticket persistence boundary: creation, listing, comments and status changes."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Callable, List, Optional

from ticksolve.models.submission import SubmissionPayload
from ticksolve.models.ticket import (
    Comment,
    StatusChange,
    Ticket,
    TicketCategory,
    TicketStatus,
)
from ticksolve.repositories.base import TicketRepository
from ticksolve.utils.clock import utc_now
from ticksolve.utils.error_handling import NotFoundError, ValidationError
from ticksolve.utils.logging_config import get_logger
from ticksolve.utils.validators import ensure_present

logger = get_logger(__name__)


def new_ticket_id() -> str:
    return f"T-{uuid.uuid4().hex[:12].upper()}"


def new_comment_id() -> str:
    return f"c-{uuid.uuid4().hex[:12]}"


class TicketService:
    """Owns ticket identity, timestamps and history; clients never assign them."""

    def __init__(
        self,
        repository: TicketRepository,
        now: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository
        self.now = now

    def create_ticket(self, student_id: str, payload: SubmissionPayload) -> Ticket:
        """Persist a submission as a new open ticket."""
        created = self.now()
        ticket = Ticket(
            id=new_ticket_id(),
            student_id=student_id,
            title=payload.title,
            category=payload.category,
            description=payload.description,
            status=TicketStatus.OPEN,
            created_at=created,
            updated_at=created,
            status_history=[StatusChange(status=TicketStatus.OPEN, timestamp=created)],
            attachments=list(payload.attachments),
        )
        self.repository.create(ticket)
        logger.info(
            "Ticket created",
            extra={"ticket_id": ticket.id, "student_id": student_id, "category": ticket.category.value},
        )
        return ticket

    def list_tickets(
        self,
        student_id: str,
        status: Optional[TicketStatus] = None,
        category: Optional[TicketCategory] = None,
    ) -> List[Ticket]:
        """Return the student's tickets in creation order, optionally filtered."""
        tickets = self.repository.list_for_student(student_id)
        if status is not None:
            tickets = [t for t in tickets if t.status == status]
        if category is not None:
            tickets = [t for t in tickets if t.category == category]
        return tickets

    def get_ticket(self, student_id: str, ticket_id: str) -> Ticket:
        ticket = self.repository.get(student_id, ticket_id)
        if ticket is None:
            raise NotFoundError(f"Ticket {ticket_id} not found")
        return ticket

    def add_comment(
        self,
        student_id: str,
        ticket_id: str,
        content: str,
        author: str = "Student",
    ) -> Comment:
        """Append a comment and return it with its assigned id."""
        if not isinstance(content, str):
            raise ValidationError("content must be text")
        ensure_present(content, "content")
        ticket = self.get_ticket(student_id, ticket_id)
        comment = Comment(
            id=new_comment_id(),
            author=author,
            content=content.strip(),
            timestamp=self._next_timestamp(ticket),
        )
        self._store(
            ticket,
            comments=[*ticket.comments, comment],
            updated_at=comment.timestamp,
        )
        logger.info("Comment added", extra={"ticket_id": ticket_id, "comment_id": comment.id})
        return comment

    def update_status(
        self,
        student_id: str,
        ticket_id: str,
        status: TicketStatus,
        comment: Optional[str] = None,
    ) -> Ticket:
        """Move a ticket to a new status, appending to its history."""
        ticket = self.get_ticket(student_id, ticket_id)
        if ticket.status == status:
            raise ValidationError(f"Ticket is already {status.label}")

        change = StatusChange(
            status=status,
            timestamp=self._next_timestamp(ticket),
            comment=comment or None,
        )
        updated = self._store(
            ticket,
            status=status,
            status_history=[*ticket.status_history, change],
            updated_at=change.timestamp,
        )
        logger.info(
            "Ticket status changed",
            extra={"ticket_id": ticket_id, "from": ticket.status.value, "to": status.value},
        )
        return updated

    def _next_timestamp(self, ticket: Ticket) -> datetime:
        # History must stay non-decreasing even if the clock steps back.
        return max(self.now(), ticket.updated_at)

    def _store(self, ticket: Ticket, **changes) -> Ticket:
        updated = Ticket.model_validate({**ticket.model_dump(), **changes})
        self.repository.save(updated)
        return updated
