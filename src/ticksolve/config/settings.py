"""
Runtime configuration for the API Lambda and local runs.

Defaults keep everything in memory so the API works without AWS resources.
"""

from dataclasses import dataclass
import os
from typing import Optional

import boto3


@dataclass
class AppSettings:
    """Application settings read from the environment."""

    environment: str = "dev"

    # Storage: "memory" seeds demo data, "dynamodb" uses the tables below.
    storage_backend: str = "memory"
    tickets_table: str = "ticksolve-tickets"
    login_attempts_table: str = "ticksolve-login-attempts"

    # Student credentials database (falls back to the in-memory demo student).
    database_url: Optional[str] = None
    db_secret_arn: Optional[str] = None

    # Sessions
    session_secret: str = "dev-only-secret"
    session_secret_arn: Optional[str] = None
    session_ttl_minutes: int = 60
    session_algorithm: str = "HS256"
    bcrypt_rounds: int = 12

    # Login throttling
    max_login_attempts: int = 5
    lockout_seconds: int = 60

    @staticmethod
    def _secret_string(secret_arn: str) -> str:
        """Read a plain-text secret such as the session signing key."""
        client = boto3.client("secretsmanager")
        return client.get_secret_value(SecretId=secret_arn)["SecretString"]

    @classmethod
    def from_environment(cls) -> "AppSettings":
        """Load settings from environment variables."""
        env = os.environ.get("ENVIRONMENT", "dev")
        settings = cls(
            environment=env,
            storage_backend=os.environ.get("STORAGE_BACKEND", "memory").lower(),
            tickets_table=os.environ.get("TICKETS_TABLE", cls.tickets_table),
            login_attempts_table=os.environ.get(
                "LOGIN_ATTEMPTS_TABLE", cls.login_attempts_table
            ),
            database_url=os.environ.get("DATABASE_URL") or None,
            db_secret_arn=os.environ.get("DB_SECRET_ARN") or None,
            session_secret=os.environ.get("SESSION_SECRET", cls.session_secret),
            session_secret_arn=os.environ.get("SESSION_SECRET_ARN") or None,
            session_ttl_minutes=int(os.environ.get("SESSION_TTL_MINUTES", "60")),
            bcrypt_rounds=int(os.environ.get("BCRYPT_ROUNDS", "12")),
            max_login_attempts=int(os.environ.get("MAX_LOGIN_ATTEMPTS", "5")),
            lockout_seconds=int(os.environ.get("LOCKOUT_SECONDS", "60")),
        )

        if "SESSION_SECRET" not in os.environ and settings.session_secret_arn:
            settings.session_secret = cls._secret_string(settings.session_secret_arn)

        # Production must not run on the development secret or demo storage.
        if env == "prod":
            if settings.session_secret == cls.session_secret:
                raise ValueError("SESSION_SECRET must be set in prod")
            settings.storage_backend = "dynamodb"

        return settings
