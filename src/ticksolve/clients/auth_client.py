"""Client for the login endpoint."""

from __future__ import annotations

from typing import Optional

import httpx

from ticksolve.clients.gateway import raise_for_response
from ticksolve.models.auth import LoginRequest, LoginResult
from ticksolve.services.login_throttle import LoginThrottle
from ticksolve.utils.error_handling import (
    AuthenticationError,
    NetworkError,
    RateLimitError,
    ValidationError,
)
from ticksolve.utils.logging_config import get_logger

logger = get_logger(__name__)

LOCAL_KEY = "loginAttempts"


class AuthClient:
    """
    Posts {studentId, password} to /auth/login.

    An optional throttle reproduces the browser-side counter. It is advisory:
    the server enforces its own limit and answers 429 regardless.
    """

    def __init__(
        self,
        base_url: str,
        throttle: Optional[LoginThrottle] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self.client = client or httpx.Client(base_url=base_url, timeout=timeout)
        self.throttle = throttle

    def login(self, student_id: str, password: str) -> LoginResult:
        if self.throttle:
            self.throttle.check(LOCAL_KEY)

        if not student_id.strip() or not password.strip():
            raise ValidationError("Please enter both student ID and password")

        body = LoginRequest(student_id=student_id, password=password)
        try:
            response = self.client.post(
                "/auth/login",
                json=body.model_dump(by_alias=True),
            )
        except httpx.HTTPError as exc:
            logger.warning("Login request failed", extra={"error": str(exc)})
            raise NetworkError("An error occurred during login. Please try again.") from exc

        try:
            raise_for_response(response)
        except (AuthenticationError, RateLimitError):
            self._count_failure()
            raise

        if self.throttle:
            self.throttle.reset(LOCAL_KEY)
        return LoginResult.model_validate(response.json())

    def _count_failure(self) -> None:
        if not self.throttle:
            return
        self.throttle.record_failure(LOCAL_KEY)
        if self.throttle.is_locked(LOCAL_KEY):
            raise RateLimitError(
                "Too many login attempts. Please try again in 1 minute.",
                retry_after_seconds=self.throttle.lockout_seconds,
            )
