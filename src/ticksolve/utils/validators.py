"""Lightweight validation helpers shared by services."""

from typing import Any

from ticksolve.utils.error_handling import ValidationError


def ensure_present(value: Any, field: str) -> None:
    """Raise ValidationError if value is missing or blank."""
    if value is None or (isinstance(value, str) and not value.strip()) or value == []:
        raise ValidationError(f"{field} is required")
