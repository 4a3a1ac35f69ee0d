"""Pydantic models for tickets, submissions and authentication."""

from ticksolve.models.auth import (  # noqa: F401
    AttemptRecord,
    LoginRequest,
    LoginResult,
    Student,
    StudentRecord,
)
from ticksolve.models.response import TicketListResponse  # noqa: F401
from ticksolve.models.submission import SubmissionPayload, TicketSubmission  # noqa: F401
from ticksolve.models.ticket import (  # noqa: F401
    Attachment,
    Comment,
    StatusChange,
    Ticket,
    TicketCategory,
    TicketStatus,
)
