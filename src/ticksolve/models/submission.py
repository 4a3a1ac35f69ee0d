"""Draft and frozen payload for new tickets."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ticksolve.models.ticket import Attachment, TicketCategory


class TicketSubmission(BaseModel):
    """
    Mutable draft filled in by the intake wizard.

    Assignments are type-checked, but completeness is only judged by the
    wizard guards (`has_category`, `has_title`) and by `freeze()`.
    """

    model_config = ConfigDict(validate_assignment=True)

    category: Optional[TicketCategory] = None
    title: str = ""
    description: str = ""
    attachments: List[Attachment] = Field(default_factory=list)

    @field_validator("category", mode="before")
    @classmethod
    def empty_category_is_unset(cls, value):
        return None if value == "" else value

    def has_category(self) -> bool:
        return self.category is not None

    def has_title(self) -> bool:
        return bool(self.title.strip())

    def freeze(self) -> "SubmissionPayload":
        """Snapshot the draft into an immutable payload for the persistence boundary."""
        return SubmissionPayload(
            category=self.category,
            title=self.title,
            description=self.description,
            attachments=[a.model_copy() for a in self.attachments],
        )


class SubmissionPayload(BaseModel):
    """Frozen, complete submission handed to the persistence boundary."""

    model_config = ConfigDict(frozen=True)

    category: TicketCategory
    title: str
    description: str = ""
    attachments: List[Attachment] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        # Surrounding whitespace only matters for this check; the title is kept as typed.
        if not value.strip():
            raise ValueError("title must be provided")
        return value
