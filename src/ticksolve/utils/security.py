"""Password hashing and session tokens."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from ticksolve.utils.error_handling import AuthenticationError


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with bcrypt."""
    # Bcrypt only looks at the first 72 bytes.
    password_bytes = password.encode("utf-8")[:72]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    password_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_session_token(
    student_id: str,
    secret: str,
    ttl_minutes: int = 60,
    algorithm: str = "HS256",
    now: Optional[datetime] = None,
) -> str:
    """Issue the opaque session indicator returned on login."""
    issued = now or datetime.now(timezone.utc)
    claims: Dict[str, Any] = {
        "sub": student_id,
        "iat": int(issued.timestamp()),
        "exp": int((issued + timedelta(minutes=ttl_minutes)).timestamp()),
        "type": "session",
    }
    return jwt.encode(claims, secret, algorithm=algorithm)


def decode_session_token(token: str, secret: str, algorithm: str = "HS256") -> str:
    """Return the student id carried by a valid session token."""
    try:
        claims = jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError:
        raise AuthenticationError("Session expired or invalid")

    if claims.get("type") != "session" or not claims.get("sub"):
        raise AuthenticationError("Session expired or invalid")
    return claims["sub"]
