"""
Gateways from the client core to the persistence boundary.

`ServiceTicketGateway` calls the ticket service in-process (tests, local
runs); `HttpTicketGateway` talks to the deployed API. Both report failures
with the AppError taxonomy so callers can keep their state and retry.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

import httpx

from ticksolve.models.response import TicketListResponse
from ticksolve.models.submission import SubmissionPayload
from ticksolve.models.ticket import Comment, Ticket
from ticksolve.services.ticket_service import TicketService
from ticksolve.utils.error_handling import (
    AppError,
    AuthenticationError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from ticksolve.utils.logging_config import get_logger

logger = get_logger(__name__)


class TicketGateway(Protocol):
    """What the composer and dashboard need from persistence."""

    def create_ticket(self, payload: SubmissionPayload) -> Ticket:
        ...

    def list_tickets(self) -> List[Ticket]:
        ...

    def add_comment(self, ticket_id: str, content: str) -> Comment:
        ...


class ServiceTicketGateway:
    """In-process gateway bound to one student's session."""

    def __init__(self, service: TicketService, student_id: str):
        self.service = service
        self.student_id = student_id

    def _call(self, operation: str, fn, *args):
        try:
            return fn(self.student_id, *args)
        except AppError:
            raise
        except Exception as exc:
            logger.exception("Ticket service call failed", extra={"operation": operation})
            raise NetworkError(f"Could not {operation}. Please try again.") from exc

    def create_ticket(self, payload: SubmissionPayload) -> Ticket:
        return self._call("submit your complaint", self.service.create_ticket, payload)

    def list_tickets(self) -> List[Ticket]:
        return self._call("load your tickets", self.service.list_tickets)

    def add_comment(self, ticket_id: str, content: str) -> Comment:
        return self._call("post your comment", self.service.add_comment, ticket_id, content)


def raise_for_response(response: httpx.Response) -> None:
    """Translate a non-2xx API response into the matching AppError."""
    if response.is_success:
        return

    try:
        body: Dict[str, Any] = response.json()
    except ValueError:
        body = {}
    message = body.get("message") or f"Request failed with status {response.status_code}"

    status = response.status_code
    if status == 401:
        raise AuthenticationError(message)
    if status == 404:
        raise NotFoundError(message)
    if status == 422:
        raise ValidationError(message)
    if status == 429:
        raise RateLimitError(message, retry_after_seconds=int(body.get("retry_after") or 0))
    raise NetworkError(message)


class HttpTicketGateway:
    """Gateway over the HTTP API using a bearer session token."""

    def __init__(
        self,
        base_url: str,
        token: str,
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self.client = client or httpx.Client(base_url=base_url, timeout=timeout)
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self.client.request(method, path, headers=self.headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Ticket API unreachable", extra={"path": path, "error": str(exc)})
            raise NetworkError("Could not reach the ticket service. Please try again.") from exc
        raise_for_response(response)
        try:
            return response.json()
        except ValueError as exc:
            logger.warning("Ticket API returned a non-JSON body", extra={"path": path})
            raise NetworkError("Unexpected response from the ticket service. Please try again.") from exc

    def create_ticket(self, payload: SubmissionPayload) -> Ticket:
        data = self._request("POST", "/tickets", json=payload.model_dump(mode="json"))
        return Ticket.model_validate(data)

    def list_tickets(self) -> List[Ticket]:
        data = self._request("GET", "/tickets")
        return TicketListResponse.model_validate(data).tickets

    def add_comment(self, ticket_id: str, content: str) -> Comment:
        data = self._request("POST", f"/tickets/{ticket_id}/comments", json={"content": content})
        return Comment.model_validate(data)

    def close(self) -> None:
        self.client.close()
