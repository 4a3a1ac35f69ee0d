"""Custom exceptions and helpers for consistent error responses."""

import json
from typing import Any, Dict, Optional


class AppError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(AppError):
    """Raised when input validation or a guard condition fails."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, status_code=422)


class AuthenticationError(AppError):
    """Raised when credentials or a session token are rejected."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, status_code=401)


class NotFoundError(AppError):
    """Raised when a requested resource is missing."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class RateLimitError(AppError):
    """Raised while a caller is locked out after too many failed attempts."""

    def __init__(
        self,
        message: str = "Too many login attempts. Please try again later.",
        retry_after_seconds: int = 0,
    ):
        super().__init__(message, status_code=429)
        self.retry_after_seconds = retry_after_seconds


class NetworkError(AppError):
    """Raised when a call across the authentication or persistence boundary fails."""

    def __init__(self, message: str = "The service is unavailable. Please try again."):
        super().__init__(message, status_code=502)


def to_response(error: AppError, correlation_id: Optional[str] = None) -> Dict[str, Any]:
    """Convert an AppError into a Lambda proxy integration response."""
    body: Dict[str, Any] = {"message": error.message, "status": "error"}
    headers = {"Content-Type": "application/json"}
    if isinstance(error, RateLimitError):
        body["retry_after"] = error.retry_after_seconds
        headers["Retry-After"] = str(error.retry_after_seconds)
    if correlation_id:
        body["correlation_id"] = correlation_id
    return {
        "statusCode": error.status_code,
        "headers": headers,
        "body": json.dumps(body),
    }
