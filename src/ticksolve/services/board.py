"""Ticket list: filtering, sorting and selection over the loaded collection."""

from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ticksolve.models.ticket import Ticket, TicketCategory, TicketStatus
from ticksolve.utils.error_handling import NotFoundError, ValidationError
from ticksolve.utils.logging_config import get_logger

logger = get_logger(__name__)

ALL = "all"


class SortField(str, Enum):
    DATE = "date"
    STATUS = "status"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


DEFAULT_SORT_DIRECTION = SortDirection.DESC

StatusFilter = Union[TicketStatus, str]
CategoryFilter = Union[TicketCategory, str]


def _coerce(enum_cls, value, name: str):
    """Accept the ALL sentinel, an enum member, or its string value."""
    if value is None or value == ALL:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Unknown {name} filter: {value}")


def _option(enum_cls, value, default, name: str):
    if not value:
        return default
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Unknown {name}: {value}")


def _sort_key(field: SortField):
    if field is SortField.DATE:
        return lambda t: t.created_at
    return lambda t: t.status.rank


class TicketBoard:
    """
    Holds the last collection handed to it and derives the visible list.

    The board is a pass-through store: duplicates are kept and nothing is
    fetched here. `query` never mutates state.
    """

    def __init__(self, tickets: Optional[Iterable[Ticket]] = None):
        self._tickets: Tuple[Ticket, ...] = tuple(tickets or ())
        self.sort_field = SortField.DATE
        self.sort_direction = DEFAULT_SORT_DIRECTION
        self.selected: Optional[Ticket] = None

    @property
    def tickets(self) -> Tuple[Ticket, ...]:
        return self._tickets

    def set_tickets(self, tickets: Iterable[Ticket]) -> None:
        """Replace the collection, keeping the selection if its id is still present."""
        self._tickets = tuple(tickets)
        if self.selected is not None:
            self.selected = next(
                (t for t in self._tickets if t.id == self.selected.id), None
            )

    def query(
        self,
        search_term: str = "",
        status_filter: StatusFilter = ALL,
        category_filter: CategoryFilter = ALL,
        sort_field: Optional[Union[SortField, str]] = None,
        sort_direction: Optional[Union[SortDirection, str]] = None,
    ) -> List[Ticket]:
        """
        Filter then sort the collection.

        Filters are conjunctive. The search term matches title or description
        case-insensitively. Sorting defaults to the board's current sort and
        is stable: equal keys keep their input order in either direction.
        """
        status = _coerce(TicketStatus, status_filter, "status")
        category = _coerce(TicketCategory, category_filter, "category")
        field = _option(SortField, sort_field, self.sort_field, "sort field")
        direction = _option(SortDirection, sort_direction, self.sort_direction, "sort direction")
        needle = (search_term or "").lower()

        matches = [
            t
            for t in self._tickets
            if (not needle or needle in t.title.lower() or needle in t.description.lower())
            and (status is None or t.status == status)
            and (category is None or t.category == category)
        ]
        # sorted() is stable and reverse=True keeps equal keys in input order.
        return sorted(matches, key=_sort_key(field), reverse=direction is SortDirection.DESC)

    def get(self, ticket_id: str) -> Ticket:
        for ticket in self._tickets:
            if ticket.id == ticket_id:
                return ticket
        raise NotFoundError(f"Ticket {ticket_id} not found")

    def select(self, ticket_id: str) -> Optional[Ticket]:
        """Select a ticket for the detail view; unknown ids leave the selection alone."""
        try:
            self.selected = self.get(ticket_id)
        except NotFoundError:
            logger.debug("Ignoring selection of unknown ticket", extra={"ticket_id": ticket_id})
        return self.selected

    def clear_selection(self) -> None:
        self.selected = None

    def toggle_sort(self, field: Union[SortField, str]) -> Tuple[SortField, SortDirection]:
        """Flip direction on the current field, or switch field and reset to descending."""
        field = _option(SortField, field, self.sort_field, "sort field")
        if field is self.sort_field:
            self.sort_direction = (
                SortDirection.ASC
                if self.sort_direction is SortDirection.DESC
                else SortDirection.DESC
            )
        else:
            self.sort_field = field
            self.sort_direction = DEFAULT_SORT_DIRECTION
        return self.sort_field, self.sort_direction

    def status_counts(self) -> Dict[TicketStatus, int]:
        counts = Counter(t.status for t in self._tickets)
        return {status: counts.get(status, 0) for status in TicketStatus}
