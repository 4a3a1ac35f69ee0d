"""
Ticket handlers: list, create, detail and status change.

All routes act on the tickets of the student named in the session token.
"""

from __future__ import annotations

from ticksolve.handlers import dependencies
from ticksolve.models.response import TicketListResponse
from ticksolve.models.submission import SubmissionPayload
from ticksolve.models.ticket import TicketStatus
from ticksolve.services.board import ALL, TicketBoard
from ticksolve.utils.error_handling import ValidationError
from ticksolve.utils.http import (
    api_handler,
    json_response,
    parse_json_body,
    path_param,
    query_param,
)
from ticksolve.utils.logging_config import get_logger

logger = get_logger(__name__)


@api_handler("Ticket listing")
def list_handler(event, correlation_id):
    """
    Handle GET /tickets.

    Query parameters mirror the dashboard controls: search, status, category,
    sort (date|status) and direction (asc|desc).
    """
    student_id = dependencies.authenticated_student(event)
    tickets = dependencies.get_ticket_service().list_tickets(student_id)

    board = TicketBoard(tickets)
    visible = board.query(
        search_term=query_param(event, "search", ""),
        status_filter=query_param(event, "status", ALL),
        category_filter=query_param(event, "category", ALL),
        sort_field=query_param(event, "sort"),
        sort_direction=query_param(event, "direction"),
    )

    response = TicketListResponse(
        message=f"{len(visible)} of {len(tickets)} tickets",
        tickets=visible,
        total=len(tickets),
        status_counts={status.value: count for status, count in board.status_counts().items()},
        correlation_id=correlation_id,
    )
    return json_response(200, response.model_dump_json())


@api_handler("Ticket creation")
def create_handler(event, correlation_id):
    """Handle POST /tickets with a submission payload."""
    student_id = dependencies.authenticated_student(event)
    payload = SubmissionPayload.model_validate(parse_json_body(event))

    ticket = dependencies.get_ticket_service().create_ticket(student_id, payload)

    logger.info(
        "Ticket submitted",
        extra={"correlation_id": correlation_id, "ticket_id": ticket.id},
    )
    return json_response(201, ticket.model_dump_json())


@api_handler("Ticket detail")
def detail_handler(event, correlation_id):
    """Handle GET /tickets/{id}."""
    student_id = dependencies.authenticated_student(event)
    ticket = dependencies.get_ticket_service().get_ticket(student_id, path_param(event, "id"))
    return json_response(200, ticket.model_dump_json())


@api_handler("Ticket status update")
def status_handler(event, correlation_id):
    """Handle POST /tickets/{id}/status with {"status": ..., "comment": ...}."""
    student_id = dependencies.authenticated_student(event)
    body = parse_json_body(event)
    try:
        status = TicketStatus(body.get("status"))
    except ValueError:
        raise ValidationError(f"Unknown status: {body.get('status')}")

    ticket = dependencies.get_ticket_service().update_status(
        student_id, path_param(event, "id"), status, body.get("comment")
    )
    return json_response(200, ticket.model_dump_json())
