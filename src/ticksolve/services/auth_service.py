"""
Authentication boundary.

Checks student credentials and issues session tokens. Failed attempts are
throttled here rather than trusted to the browser.
"""

from __future__ import annotations

from ticksolve.models.auth import LoginRequest, LoginResult
from ticksolve.repositories.base import StudentRepository
from ticksolve.services.login_throttle import LoginThrottle
from ticksolve.utils.error_handling import (
    AuthenticationError,
    RateLimitError,
    ValidationError,
)
from ticksolve.utils.logging_config import get_logger
from ticksolve.utils.security import create_session_token, verify_password

logger = get_logger(__name__)

LOCKOUT_STARTED_MESSAGE = "Too many login attempts. Please try again in 1 minute."


class AuthService:
    """Validates logins against the student store."""

    def __init__(
        self,
        students: StudentRepository,
        throttle: LoginThrottle,
        session_secret: str,
        session_ttl_minutes: int = 60,
        session_algorithm: str = "HS256",
    ):
        self.students = students
        self.throttle = throttle
        self.session_secret = session_secret
        self.session_ttl_minutes = session_ttl_minutes
        self.session_algorithm = session_algorithm

    def login(self, request: LoginRequest, client_key: str) -> LoginResult:
        """
        Authenticate a student.

        Blank fields are rejected before the throttle is consulted and never
        count as attempts. A wrong password counts; the attempt that reaches
        the limit is answered with the lockout message instead of the
        credentials message.
        """
        if not request.student_id.strip() or not request.password.strip():
            raise ValidationError("Please enter both student ID and password")

        self.throttle.check(client_key)

        student = self.students.find(request.student_id.strip())
        if student is None or not verify_password(request.password, student.password_hash):
            attempts = self.throttle.record_failure(client_key)
            logger.info(
                "Login failed",
                extra={"throttle_key": client_key, "attempts": attempts},
            )
            if self.throttle.is_locked(client_key):
                raise RateLimitError(
                    LOCKOUT_STARTED_MESSAGE,
                    retry_after_seconds=self.throttle.lockout_seconds,
                )
            raise AuthenticationError("Invalid credentials")

        self.throttle.reset(client_key)
        token = create_session_token(
            student.student_id,
            self.session_secret,
            ttl_minutes=self.session_ttl_minutes,
            algorithm=self.session_algorithm,
        )
        logger.info("Login succeeded", extra={"student_id": student.student_id})
        return LoginResult(token=token, student=student.profile())
