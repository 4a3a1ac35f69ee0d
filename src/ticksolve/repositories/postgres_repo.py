"""PostgreSQL student repository using SQLAlchemy Core."""

from __future__ import annotations

import json
from typing import Optional

import boto3
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool

from ticksolve.models.auth import StudentRecord
from ticksolve.utils.logging_config import get_logger

logger = get_logger(__name__)

# Connection pooling for Lambda reuse.
_engine: Optional[Engine] = None


def get_db_engine(database_url: Optional[str], db_secret_arn: Optional[str] = None) -> Optional[Engine]:
    """Get or create SQLAlchemy engine with connection pooling."""
    global _engine
    if _engine is None:
        db_url = database_url
        if not db_url and db_secret_arn:
            db_url = _secret_to_db_url(db_secret_arn)
        if not db_url:
            logger.warning("DATABASE_URL not set; using the in-memory student store")
            return None
        _engine = create_engine(
            db_url,
            poolclass=QueuePool,
            pool_size=1,
            max_overflow=2,
            pool_pre_ping=True,
            pool_recycle=300,
        )
    return _engine


def _secret_to_db_url(secret_arn: str) -> Optional[str]:
    """Build a SQLAlchemy URL from an RDS secret."""
    try:
        sm = boto3.client("secretsmanager")
        secret = json.loads(sm.get_secret_value(SecretId=secret_arn)["SecretString"])
    except Exception as exc:
        logger.warning("Failed to load DB secret", extra={"error": str(exc)})
        return None

    host = secret.get("host")
    port = secret.get("port", 5432)
    username = secret.get("username")
    password = secret.get("password")
    dbname = secret.get("dbname", "postgres")
    if not (host and username and password):
        return None
    return f"postgresql+psycopg2://{username}:{password}@{host}:{port}/{dbname}"


class PostgresStudentRepository:
    """Reads student credentials from the `students` table."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def find(self, student_id: str) -> Optional[StudentRecord]:
        stmt = text(
            """
            SELECT student_id, name, department, year, password_hash
            FROM students
            WHERE student_id = :student_id
        """
        )
        with self.engine.connect() as conn:
            row = conn.execute(stmt, {"student_id": student_id}).fetchone()
            return StudentRecord.model_validate(dict(row._mapping)) if row else None
