"""
Ticket intake wizard.

The wizard walks one draft through Category -> Details -> Review, then a
confirmation gate, then a short "submitted" display before starting over.
States and events are explicit; `transition` is the whole state machine and
the composer only wires it to the draft, the gateway and the clock.
"""

from __future__ import annotations

import time
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from ticksolve.clients.gateway import TicketGateway
from ticksolve.models.submission import TicketSubmission
from ticksolve.models.ticket import Ticket
from ticksolve.utils.clock import Clock, Deadline
from ticksolve.utils.error_handling import AppError, ValidationError
from ticksolve.utils.logging_config import get_logger

logger = get_logger(__name__)

SUCCESS_MESSAGE = (
    "Your complaint has been successfully submitted. "
    "You can track its status in your dashboard."
)
EDITABLE_FIELDS = ("category", "title", "description", "attachments")


class ComposerState(str, Enum):
    STEP1 = "step1"
    STEP2 = "step2"
    STEP3 = "step3"
    CONFIRM_PENDING = "confirm_pending"
    SUBMITTED = "submitted"


class WizardStep(IntEnum):
    CATEGORY = 1
    DETAILS = 2
    REVIEW = 3


class ComposerEvent(str, Enum):
    ADVANCE = "advance"
    RETREAT = "retreat"
    REQUEST_CONFIRMATION = "request_confirmation"
    DISMISS_CONFIRMATION = "dismiss_confirmation"
    SUBMIT_SUCCEEDED = "submit_succeeded"
    SUBMIT_FAILED = "submit_failed"
    RESET = "reset"


S = ComposerState
E = ComposerEvent

_TRANSITIONS: Dict[Tuple[ComposerState, ComposerEvent], ComposerState] = {
    (S.STEP1, E.ADVANCE): S.STEP2,
    (S.STEP2, E.ADVANCE): S.STEP3,
    (S.STEP3, E.ADVANCE): S.CONFIRM_PENDING,
    (S.STEP3, E.REQUEST_CONFIRMATION): S.CONFIRM_PENDING,
    (S.STEP2, E.RETREAT): S.STEP1,
    (S.STEP3, E.RETREAT): S.STEP2,
    (S.CONFIRM_PENDING, E.DISMISS_CONFIRMATION): S.STEP3,
    (S.CONFIRM_PENDING, E.SUBMIT_SUCCEEDED): S.SUBMITTED,
    (S.CONFIRM_PENDING, E.SUBMIT_FAILED): S.STEP3,
}

# Completeness guards checked before leaving a step.
_GUARDS: Dict[Tuple[ComposerState, ComposerEvent], Tuple[Callable[[TicketSubmission], bool], str]] = {
    (S.STEP1, E.ADVANCE): (TicketSubmission.has_category, "Please select a complaint category."),
    (S.STEP2, E.ADVANCE): (TicketSubmission.has_title, "Please enter a title for your complaint."),
}

_STEP_OF_STATE = {
    S.STEP1: WizardStep.CATEGORY,
    S.STEP2: WizardStep.DETAILS,
    S.STEP3: WizardStep.REVIEW,
    S.CONFIRM_PENDING: WizardStep.REVIEW,
    S.SUBMITTED: WizardStep.REVIEW,
}


def transition(
    state: ComposerState, event: ComposerEvent, submission: TicketSubmission
) -> ComposerState:
    """Return the next state, or raise ValidationError if the move is not allowed."""
    if event is E.RESET:
        return S.STEP1

    guard = _GUARDS.get((state, event))
    if guard is not None:
        check, message = guard
        if not check(submission):
            raise ValidationError(message)

    try:
        return _TRANSITIONS[(state, event)]
    except KeyError:
        raise ValidationError(f"Cannot {event.value.replace('_', ' ')} from {state.value}")


class TicketComposer:
    """Drives one draft through the intake wizard and hands it to the gateway."""

    def __init__(
        self,
        gateway: TicketGateway,
        on_submitted: Optional[Callable[[Ticket], None]] = None,
        on_close: Optional[Callable[[], None]] = None,
        success_display_seconds: float = 2.0,
        clock: Clock = time.monotonic,
    ):
        self.gateway = gateway
        self.on_submitted = on_submitted
        self.on_close = on_close
        self.success_display_seconds = success_display_seconds
        self._reset_deadline = Deadline(clock=clock)
        self._closed = False
        self._start_over()

    def _start_over(self) -> None:
        self._submission = TicketSubmission()
        self.state = S.STEP1
        self.error: Optional[str] = None
        self.submitted_ticket: Optional[Ticket] = None
        self._reset_deadline.cancel()

    @property
    def submission(self) -> TicketSubmission:
        """Copy of the draft; edits go through set_field."""
        return self._submission.model_copy(deep=True)

    @property
    def step(self) -> WizardStep:
        return _STEP_OF_STATE[self.state]

    @property
    def confirmation_open(self) -> bool:
        return self.state is S.CONFIRM_PENDING

    @property
    def message(self) -> Optional[str]:
        """Inline message for the host: an error, or the success notice."""
        if self.error:
            return self.error
        if self.state is S.SUBMITTED:
            return SUCCESS_MESSAGE
        return None

    def _fire(self, event: ComposerEvent) -> ComposerState:
        self.state = transition(self.state, event, self._submission)
        return self.state

    def tick(self) -> bool:
        """Apply the post-submit reset once its display interval has elapsed."""
        if self._closed or not self._reset_deadline.expired():
            return False
        logger.debug("Composer reset after submission")
        self._start_over()
        if self.on_close:
            self.on_close()
        return True

    def advance(self) -> bool:
        """Move forward one step; at the review step open the confirmation gate."""
        self.tick()
        try:
            self._fire(E.ADVANCE)
        except ValidationError as exc:
            self.error = exc.message
            logger.info("Cannot advance", extra={"state": self.state.value, "reason": exc.message})
            return False
        self.error = None
        return True

    def retreat(self) -> bool:
        self.tick()
        try:
            self._fire(E.RETREAT)
        except ValidationError:
            return False
        self.error = None
        return True

    def set_field(self, field: str, value: Any) -> None:
        """Update one draft field. Completeness is judged by the step guards, not here."""
        self.tick()
        if self.state is S.SUBMITTED:
            raise ValidationError("This complaint has already been submitted.")
        if field not in EDITABLE_FIELDS:
            raise ValidationError(f"Unknown field: {field}")
        try:
            setattr(self._submission, field, value)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid value for {field}") from exc

    def request_confirmation(self) -> bool:
        self.tick()
        try:
            self._fire(E.REQUEST_CONFIRMATION)
        except ValidationError as exc:
            self.error = exc.message
            return False
        return True

    def dismiss_confirmation(self) -> bool:
        try:
            self._fire(E.DISMISS_CONFIRMATION)
        except ValidationError:
            return False
        return True

    def confirm_submit(self) -> Optional[Ticket]:
        """
        Send the frozen draft to the persistence gateway.

        On failure the wizard goes back to the review step with the draft
        untouched and `error` set, so the student can retry.
        """
        self.tick()
        if self.state is not S.CONFIRM_PENDING:
            self.error = "Please review your complaint and confirm before submitting."
            return None

        try:
            payload = self._submission.freeze()
        except PydanticValidationError:
            self._fire(E.SUBMIT_FAILED)
            self.error = "Please choose a category and enter a title before submitting."
            return None

        try:
            ticket = self.gateway.create_ticket(payload)
        except AppError as exc:
            self._fire(E.SUBMIT_FAILED)
            self.error = exc.message
            logger.warning("Ticket submission failed", extra={"error": exc.message})
            return None

        self._fire(E.SUBMIT_SUCCEEDED)
        self.error = None
        self.submitted_ticket = ticket
        self._reset_deadline.schedule(self.success_display_seconds)
        logger.info("Ticket submitted", extra={"ticket_id": ticket.id})
        if self.on_submitted:
            self.on_submitted(ticket)
        return ticket

    def cancel(self) -> None:
        """Discard the draft from any step and ask the host to close the wizard."""
        self._start_over()
        if self.on_close:
            self.on_close()

    def clear_error(self) -> None:
        self.error = None

    def close(self) -> None:
        """Teardown: drop any pending reset so nothing fires against a closed host."""
        self._reset_deadline.cancel()
        self._closed = True
