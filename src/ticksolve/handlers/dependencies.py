"""
Lazily built services shared by the handlers.

Nothing here runs at import time, so importing a handler never touches AWS
or the database. Tests call `reset()` to start from a clean slate.
"""

from __future__ import annotations

from typing import Dict, Optional

from ticksolve.config.settings import AppSettings
from ticksolve.utils.error_handling import AuthenticationError
from ticksolve.utils.http import bearer_token
from ticksolve.utils.logging_config import get_logger
from ticksolve.utils.security import decode_session_token

logger = get_logger(__name__)

DEMO_PASSWORD = "password123"

_settings: Optional[AppSettings] = None
_ticket_service = None
_auth_service = None


def get_settings() -> AppSettings:
    global _settings
    if _settings is None:
        _settings = AppSettings.from_environment()
    return _settings


def get_ticket_service():
    """Lazy-load TicketService on the configured backend."""
    global _ticket_service
    if _ticket_service is None:
        from ticksolve.services.ticket_service import TicketService

        settings = get_settings()
        if settings.storage_backend == "dynamodb":
            from ticksolve.repositories.dynamodb_repo import DynamoDbTicketRepository

            repository = DynamoDbTicketRepository(settings.tickets_table)
        else:
            from ticksolve.repositories.memory_repo import InMemoryTicketRepository, demo_tickets

            repository = InMemoryTicketRepository(demo_tickets())
        _ticket_service = TicketService(repository)
        logger.info("Ticket service ready", extra={"backend": settings.storage_backend})
    return _ticket_service


def get_auth_service():
    """Lazy-load AuthService with its student store and attempt store."""
    global _auth_service
    if _auth_service is None:
        from ticksolve.repositories.postgres_repo import PostgresStudentRepository, get_db_engine
        from ticksolve.services.auth_service import AuthService
        from ticksolve.services.login_throttle import InMemoryAttemptStore, LoginThrottle

        settings = get_settings()
        engine = get_db_engine(settings.database_url, settings.db_secret_arn)
        if engine is not None:
            students = PostgresStudentRepository(engine)
        else:
            from ticksolve.repositories.memory_repo import InMemoryStudentRepository, demo_student

            students = InMemoryStudentRepository(
                [demo_student(DEMO_PASSWORD, rounds=settings.bcrypt_rounds)]
            )

        if settings.storage_backend == "dynamodb":
            from ticksolve.repositories.dynamodb_repo import DynamoDbAttemptStore

            attempts = DynamoDbAttemptStore(settings.login_attempts_table)
        else:
            attempts = InMemoryAttemptStore()

        _auth_service = AuthService(
            students,
            LoginThrottle(
                attempts,
                max_attempts=settings.max_login_attempts,
                lockout_seconds=settings.lockout_seconds,
            ),
            session_secret=settings.session_secret,
            session_ttl_minutes=settings.session_ttl_minutes,
            session_algorithm=settings.session_algorithm,
        )
    return _auth_service


def authenticated_student(event: Dict) -> str:
    """Student id from the bearer session token, or AuthenticationError."""
    token = bearer_token(event)
    if not token:
        raise AuthenticationError("Login required")
    settings = get_settings()
    return decode_session_token(token, settings.session_secret, settings.session_algorithm)


def reset() -> None:
    global _settings, _ticket_service, _auth_service
    _settings = None
    _ticket_service = None
    _auth_service = None
