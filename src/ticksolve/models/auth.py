"""Student and login models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Student(BaseModel):
    """Profile shown on the dashboard."""

    student_id: str
    name: str
    department: Optional[str] = None
    year: Optional[str] = None

    @property
    def initials(self) -> str:
        """Avatar fallback: first letter of each part of the name."""
        return "".join(part[0] for part in self.name.split()).upper()


class StudentRecord(Student):
    """Student row including the stored bcrypt hash."""

    password_hash: str

    def profile(self) -> Student:
        return Student.model_validate(self.model_dump(exclude={"password_hash"}))


class LoginRequest(BaseModel):
    """Login body as sent by the browser: {studentId, password}."""

    model_config = ConfigDict(populate_by_name=True)

    student_id: str = Field(default="", alias="studentId")
    password: str = ""


class LoginResult(BaseModel):
    """Successful login: an opaque session token plus where to go next."""

    token: str
    redirect: str = "/dashboard"
    student: Student


class AttemptRecord(BaseModel):
    """Failed-login counter for one throttle key."""

    count: int = 0
    locked_until: Optional[float] = None
