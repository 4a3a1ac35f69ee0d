"""Ticket models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class TicketCategory(str, Enum):
    """Fixed complaint taxonomy offered by the intake wizard."""

    BULLYING = "bullying"
    GRADE_CONSULTATION = "grade_consultation"
    SCHOOL_VIOLENCE = "school_violence"
    FACILITY_ISSUE = "facility_issue"
    TEACHER_COMPLAINT = "teacher_complaint"
    OTHER = "other"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class TicketStatus(str, Enum):
    """Ticket lifecycle states, declared in their display order."""

    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"

    @property
    def rank(self) -> int:
        """Position in the fixed order open < in_progress < resolved < closed."""
        return list(TicketStatus).index(self)

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class Attachment(BaseModel):
    """Reference to a file the student attached to a complaint."""

    name: str
    content_type: Optional[str] = None
    size_bytes: Optional[int] = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("attachment name must be provided")
        return value


class StatusChange(BaseModel):
    """One entry of a ticket's append-only status history."""

    status: TicketStatus
    timestamp: datetime
    comment: Optional[str] = None


class Comment(BaseModel):
    """Comment on a ticket; ids are assigned by the persistence service."""

    id: str
    author: str
    content: str
    timestamp: datetime


class Ticket(BaseModel):
    """Canonical persisted complaint."""

    id: str
    student_id: str
    title: str
    category: TicketCategory
    description: str = ""
    status: TicketStatus
    created_at: datetime
    updated_at: datetime
    status_history: List[StatusChange]
    comments: List[Comment] = Field(default_factory=list)
    attachments: List[Attachment] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_history(self) -> "Ticket":
        """Status history must be non-empty, chronological and end at `status`."""
        if not self.status_history:
            raise ValueError("status_history must contain the initial entry")
        stamps = [entry.timestamp for entry in self.status_history]
        if any(later < earlier for earlier, later in zip(stamps, stamps[1:])):
            raise ValueError("status_history timestamps must be non-decreasing")
        if self.status_history[-1].status != self.status:
            raise ValueError("status must match the latest status_history entry")
        if self.updated_at < self.created_at:
            raise ValueError("updated_at cannot precede created_at")
        return self
