"""
Pydantic model validation tests.

Run with: pytest tests/unit/test_models.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from ticksolve.models.auth import LoginRequest, Student
from ticksolve.models.submission import SubmissionPayload, TicketSubmission
from ticksolve.models.ticket import Attachment, StatusChange, Ticket, TicketCategory, TicketStatus

NOW = datetime(2023, 5, 15, 10, 30, tzinfo=timezone.utc)


def _ticket(**overrides):
    data = dict(
        id="T-1",
        student_id="S12345",
        title="Issue with Math Exam Grade",
        category="grade_consultation",
        status="open",
        created_at=NOW,
        updated_at=NOW,
        status_history=[{"status": "open", "timestamp": NOW}],
    )
    data.update(overrides)
    return Ticket(**data)


class TestEnums:
    def test_category_values(self):
        assert [c.value for c in TicketCategory] == [
            "bullying",
            "grade_consultation",
            "school_violence",
            "facility_issue",
            "teacher_complaint",
            "other",
        ]

    def test_category_label(self):
        assert TicketCategory.GRADE_CONSULTATION.label == "Grade Consultation"

    def test_status_rank_order(self):
        ranks = [s.rank for s in (TicketStatus.OPEN, TicketStatus.IN_PROGRESS, TicketStatus.RESOLVED, TicketStatus.CLOSED)]
        assert ranks == [0, 1, 2, 3]
        assert TicketStatus.IN_PROGRESS.label == "In Progress"


class TestTicket:
    def test_valid_ticket(self):
        ticket = _ticket()
        assert ticket.status is TicketStatus.OPEN
        assert ticket.comments == []

    def test_history_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            _ticket(status_history=[])

    def test_status_must_match_last_history_entry(self):
        with pytest.raises(ValidationError):
            _ticket(status="resolved")

    def test_history_must_be_chronological(self):
        with pytest.raises(ValidationError):
            _ticket(
                status="in_progress",
                updated_at=NOW + timedelta(days=1),
                status_history=[
                    {"status": "open", "timestamp": NOW},
                    {"status": "in_progress", "timestamp": NOW - timedelta(minutes=1)},
                ],
            )

    def test_equal_history_timestamps_allowed(self):
        ticket = _ticket(
            status="in_progress",
            status_history=[StatusChange(status="open", timestamp=NOW), StatusChange(status="in_progress", timestamp=NOW)],
        )
        assert ticket.status is TicketStatus.IN_PROGRESS

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            _ticket(category="parking")


class TestSubmission:
    def test_empty_draft_is_incomplete(self):
        draft = TicketSubmission()
        assert not draft.has_category()
        assert not draft.has_title()

    def test_whitespace_title_does_not_count(self):
        draft = TicketSubmission(title="   ")
        assert not draft.has_title()

    def test_assignment_is_type_checked(self):
        draft = TicketSubmission()
        draft.category = "bullying"
        assert draft.category is TicketCategory.BULLYING
        with pytest.raises(ValidationError):
            draft.category = "parking"

    def test_empty_string_clears_category(self):
        draft = TicketSubmission(category="bullying")
        draft.category = ""
        assert draft.category is None

    def test_freeze_keeps_title_as_typed(self):
        draft = TicketSubmission(category="other", title="  Broken heater  ")
        payload = draft.freeze()
        assert payload.title == "  Broken heater  "
        with pytest.raises(ValidationError):
            payload.title = "changed"

    def test_freeze_copies_attachments(self):
        draft = TicketSubmission(category="other", title="Leak", attachments=[{"name": "photo.jpg"}])
        payload = draft.freeze()
        draft.attachments = []
        assert [a.name for a in payload.attachments] == ["photo.jpg"]

    def test_freeze_requires_category_and_title(self):
        with pytest.raises(ValidationError):
            TicketSubmission(title="No category").freeze()
        with pytest.raises(ValidationError):
            SubmissionPayload(category="other", title=" ")

    def test_attachment_name_required(self):
        with pytest.raises(ValidationError):
            Attachment(name=" ")


class TestAuthModels:
    def test_login_request_reads_camel_case(self):
        request = LoginRequest.model_validate({"studentId": "S12345", "password": "pw"})
        assert request.student_id == "S12345"
        assert request.model_dump(by_alias=True) == {"studentId": "S12345", "password": "pw"}

    def test_student_initials(self):
        assert Student(student_id="S1", name="John Doe").initials == "JD"
        assert Student(student_id="S2", name="ada lovelace byron").initials == "ALB"
