"""
Login handler for POST /auth/login.

Body: {"studentId": ..., "password": ...}. Failed attempts are throttled per
source IP (falling back to the student id when API Gateway gives no IP).
"""

from __future__ import annotations

from ticksolve.handlers import dependencies
from ticksolve.models.auth import LoginRequest
from ticksolve.utils.http import api_handler, json_response, parse_json_body, source_ip
from ticksolve.utils.logging_config import get_logger

logger = get_logger(__name__)


@api_handler("Login")
def lambda_handler(event, correlation_id):
    request = LoginRequest.model_validate(parse_json_body(event))
    client_key = source_ip(event) or request.student_id.strip().upper() or "anonymous"

    result = dependencies.get_auth_service().login(request, client_key)

    logger.info(
        "Student logged in",
        extra={"correlation_id": correlation_id, "student_id": result.student.student_id},
    )
    body = result.model_dump(mode="json")
    body["correlation_id"] = correlation_id
    return json_response(200, body)
