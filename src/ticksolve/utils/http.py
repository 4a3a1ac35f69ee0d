"""Helpers for API Gateway HTTP API (payload v2) events and responses."""

from __future__ import annotations

import base64
import functools
import json
import uuid
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from ticksolve.utils.error_handling import AppError, ValidationError, to_response
from ticksolve.utils.logging_config import get_logger

logger = get_logger(__name__)


def json_response(status: int, body: Any) -> Dict[str, Any]:
    """Format a JSON API Gateway HTTP API response."""
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": body if isinstance(body, str) else json.dumps(body),
    }


def parse_json_body(event: Dict[str, Any]) -> Dict[str, Any]:
    raw = event.get("body") or "{}"
    if event.get("isBase64Encoded"):
        raw = base64.b64decode(raw).decode("utf-8")
    try:
        payload = json.loads(raw)
    except ValueError:
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def header(event: Dict[str, Any], name: str) -> Optional[str]:
    headers = event.get("headers") or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def bearer_token(event: Dict[str, Any]) -> Optional[str]:
    value = header(event, "Authorization") or ""
    scheme, _, token = value.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def path_param(event: Dict[str, Any], name: str) -> Optional[str]:
    return (event.get("pathParameters") or {}).get(name)


def query_param(event: Dict[str, Any], name: str, default: Optional[str] = None) -> Optional[str]:
    return (event.get("queryStringParameters") or {}).get(name) or default


def source_ip(event: Dict[str, Any]) -> Optional[str]:
    return event.get("requestContext", {}).get("http", {}).get("sourceIp")


def api_handler(operation: str) -> Callable:
    """
    Wrap a handler with correlation ids and the shared error mapping.

    The wrapped function receives (event, correlation_id) and returns a
    response dict. AppErrors become their status code, pydantic validation
    failures become 422 and anything else is logged and returned as 500.
    """

    def decorator(fn: Callable[[Dict[str, Any], str], Dict[str, Any]]):
        @functools.wraps(fn)
        def wrapper(event, context):
            correlation_id = str(uuid.uuid4())
            try:
                return fn(event, correlation_id)
            except AppError as exc:
                logger.info(
                    f"{operation} rejected",
                    extra={"correlation_id": correlation_id, "status_code": exc.status_code, "error": exc.message},
                )
                return to_response(exc, correlation_id)
            except PydanticValidationError as exc:
                logger.info(f"{operation} rejected", extra={"correlation_id": correlation_id, "error": str(exc)})
                return to_response(ValidationError("Invalid request"), correlation_id)
            except Exception:
                logger.exception(f"{operation} failed", extra={"correlation_id": correlation_id})
                return json_response(
                    500,
                    {"message": "Internal server error", "status": "error", "correlation_id": correlation_id},
                )

        return wrapper

    return decorator
