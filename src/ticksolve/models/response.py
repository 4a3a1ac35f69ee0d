"""Response bodies that are more than a single model dump."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ticksolve.models.ticket import Ticket


class TicketListResponse(BaseModel):
    """
    Body of GET /tickets.

    `tickets` is the filtered, sorted view; `total` and `status_counts`
    describe the student's whole collection so the dashboard summary does not
    change with the filters.
    """

    message: str
    tickets: List[Ticket] = Field(default_factory=list)
    total: int = 0
    status_counts: Dict[str, int] = Field(default_factory=dict)
    correlation_id: Optional[str] = None
