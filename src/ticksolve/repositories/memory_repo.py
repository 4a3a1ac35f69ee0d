"""
In-memory repositories.

Used by tests and by the API when STORAGE_BACKEND=memory. The demo data set
mirrors what the dashboard shows before any real backend is connected.
"""

from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional

from ticksolve.models.auth import StudentRecord
from ticksolve.models.ticket import Ticket
from ticksolve.utils.error_handling import ValidationError
from ticksolve.utils.security import hash_password

DEMO_STUDENT_ID = "S12345"


class InMemoryTicketRepository:
    """Dict-backed ticket store; insertion order doubles as creation order."""

    def __init__(self, tickets: Optional[List[Ticket]] = None):
        self._tickets: Dict[str, Ticket] = {}
        self._lock = Lock()
        for ticket in tickets or []:
            self.create(ticket)

    def create(self, ticket: Ticket) -> None:
        with self._lock:
            if ticket.id in self._tickets:
                raise ValidationError(f"Ticket id {ticket.id} already exists")
            self._tickets[ticket.id] = ticket

    def save(self, ticket: Ticket) -> None:
        with self._lock:
            self._tickets[ticket.id] = ticket

    def get(self, student_id: str, ticket_id: str) -> Optional[Ticket]:
        ticket = self._tickets.get(ticket_id)
        if ticket is None or ticket.student_id != student_id:
            return None
        return ticket

    def list_for_student(self, student_id: str) -> List[Ticket]:
        with self._lock:
            return [t for t in self._tickets.values() if t.student_id == student_id]


class InMemoryStudentRepository:
    """Dict-backed credential store."""

    def __init__(self, students: Optional[List[StudentRecord]] = None):
        self._students = {s.student_id: s for s in students or []}

    def add(self, student: StudentRecord) -> None:
        self._students[student.student_id] = student

    def find(self, student_id: str) -> Optional[StudentRecord]:
        return self._students.get(student_id)


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


def demo_student(password: str, rounds: int = 12) -> StudentRecord:
    """The sample student used by the demo dashboard."""
    return StudentRecord(
        student_id=DEMO_STUDENT_ID,
        name="John Doe",
        department="Computer Science",
        year="3rd Year",
        password_hash=hash_password(password, rounds=rounds),
    )


def demo_tickets(student_id: str = DEMO_STUDENT_ID) -> List[Ticket]:
    """Sample tickets covering every status."""
    raw = [
        {
            "id": "T-001",
            "title": "Classroom Bullying Incident",
            "category": "bullying",
            "description": "I've been experiencing bullying from a group of students in my math class.",
            "history": [("open", "2023-05-15T09:00:00", None)],
        },
        {
            "id": "T-002",
            "title": "Grade Discrepancy in Biology",
            "category": "grade_consultation",
            "description": "I believe there was an error in grading my last biology exam.",
            "history": [
                ("open", "2023-05-10T10:30:00", None),
                ("in_progress", "2023-05-11T14:20:00", "Assigned to Biology Department"),
            ],
            "comments": [
                ("c1", "Student", "I've attached my exam paper for reference.", "2023-05-10T10:35:00"),
                (
                    "c2",
                    "Admin",
                    "We've received your complaint and forwarded it to the Biology Department for review.",
                    "2023-05-11T09:15:00",
                ),
            ],
        },
        {
            "id": "T-003",
            "title": "Cafeteria Food Quality",
            "category": "other",
            "description": "The quality of food in the cafeteria has significantly declined.",
            "history": [
                ("open", "2023-05-01T12:00:00", None),
                ("in_progress", "2023-05-02T08:45:00", None),
                ("resolved", "2023-05-06T16:00:00", "New catering contract in place"),
            ],
        },
        {
            "id": "T-004",
            "title": "Altercation in Hallway",
            "category": "school_violence",
            "description": "I witnessed a physical altercation between two students in the east hallway.",
            "history": [
                ("open", "2023-04-28T11:15:00", None),
                ("resolved", "2023-04-30T09:00:00", "Students met with the counsellor"),
                ("closed", "2023-05-03T10:00:00", None),
            ],
        },
    ]

    tickets = []
    for item in raw:
        history = [
            {"status": status, "timestamp": _ts(stamp), "comment": comment}
            for status, stamp, comment in item["history"]
        ]
        tickets.append(
            Ticket(
                id=item["id"],
                student_id=student_id,
                title=item["title"],
                category=item["category"],
                description=item["description"],
                status=history[-1]["status"],
                created_at=history[0]["timestamp"],
                updated_at=history[-1]["timestamp"],
                status_history=history,
                comments=[
                    {"id": cid, "author": author, "content": content, "timestamp": _ts(stamp)}
                    for cid, author, content, stamp in item.get("comments", [])
                ],
            )
        )
    return tickets
