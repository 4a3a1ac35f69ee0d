"""DynamoDB repositories for tickets and login attempts."""

from decimal import Decimal
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import ClientError

from ticksolve.models.auth import AttemptRecord
from ticksolve.models.ticket import Ticket
from ticksolve.utils.error_handling import ValidationError
from ticksolve.utils.logging_config import get_logger

logger = get_logger(__name__)


class DynamoDbTicketRepository:
    """Tickets partitioned by student_id with ticket_id as the sort key."""

    def __init__(self, table_name: str, table=None):
        self.table = table or boto3.resource("dynamodb").Table(table_name)

    def create(self, ticket: Ticket) -> None:
        """Insert a ticket, refusing to overwrite an existing id."""
        try:
            self.table.put_item(
                Item=self._to_item(ticket),
                ConditionExpression="attribute_not_exists(ticket_id)",
            )
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise ValidationError(f"Ticket id {ticket.id} already exists")
            raise

    def save(self, ticket: Ticket) -> None:
        self.table.put_item(Item=self._to_item(ticket))

    def get(self, student_id: str, ticket_id: str) -> Optional[Ticket]:
        resp = self.table.get_item(Key={"student_id": student_id, "ticket_id": ticket_id})
        item = resp.get("Item")
        return self._from_item(item) if item else None

    def list_for_student(self, student_id: str) -> List[Ticket]:
        """Query every page for the student and order by creation time."""
        kwargs: Dict[str, Any] = {
            "KeyConditionExpression": "student_id = :sid",
            "ExpressionAttributeValues": {":sid": student_id},
        }
        items: List[Dict[str, Any]] = []
        while True:
            resp = self.table.query(**kwargs)
            items.extend(resp.get("Items", []))
            last_key = resp.get("LastEvaluatedKey")
            if not last_key:
                break
            kwargs["ExclusiveStartKey"] = last_key

        tickets = [self._from_item(item) for item in items]
        # Sort keys order by id; creation order is what callers expect.
        return sorted(tickets, key=lambda t: t.created_at)

    @staticmethod
    def _to_item(ticket: Ticket) -> Dict[str, Any]:
        item = ticket.model_dump(mode="json", exclude={"id"})
        item["ticket_id"] = ticket.id
        return item

    @staticmethod
    def _from_item(item: Dict[str, Any]) -> Ticket:
        data = dict(item)
        data["id"] = data.pop("ticket_id")
        return Ticket.model_validate(data)


class DynamoDbAttemptStore:
    """Failed-login counters keyed by throttle key, expired by DynamoDB TTL."""

    def __init__(self, table_name: str, table=None, ttl_seconds: int = 3600):
        self.table = table or boto3.resource("dynamodb").Table(table_name)
        self.ttl_seconds = ttl_seconds

    def get(self, key: str) -> AttemptRecord:
        resp = self.table.get_item(Key={"throttle_key": key})
        item = resp.get("Item")
        if not item:
            return AttemptRecord()
        locked_until = item.get("locked_until")
        return AttemptRecord(
            count=int(item.get("count", 0)),
            locked_until=float(locked_until) if locked_until is not None else None,
        )

    def save(self, key: str, record: AttemptRecord, now: float) -> None:
        item: Dict[str, Any] = {
            "throttle_key": key,
            "count": record.count,
            "ttl": int(now) + self.ttl_seconds,
        }
        if record.locked_until is not None:
            # DynamoDB rejects float; Decimal via str keeps the value exact.
            item["locked_until"] = Decimal(str(record.locked_until))
        self.table.put_item(Item=item)
        logger.debug("Attempt record saved", extra={"throttle_key": key, "count": record.count})
