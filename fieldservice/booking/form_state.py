"""
Finite state machine for the public booking form lifecycle.

Defines five form states and explicit transitions with triggers. Edits
settle the form into the state the current draft warrants; submission is
only reachable with every required field filled in.

Usage:
    sm = BookingFormStateMachine()
    sm.transition(FormTrigger.EDIT, draft)
    assert sm.current_state == FormState.READY
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from fieldservice.schemas.order_schema import BookingDraft

logger = logging.getLogger(__name__)


class FormState(str, Enum):
    """All possible states in a booking form session."""
    EDITING = "editing"
    SLOT_PENDING = "slot_pending"
    READY = "ready"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"


class FormTrigger(str, Enum):
    """Events that cause state transitions."""
    EDIT = "edit"
    SUBMIT = "submit"
    SUBMIT_SUCCEEDED = "submit_succeeded"
    SUBMIT_FAILED = "submit_failed"


def _awaiting_slot(draft: BookingDraft) -> bool:
    return draft.awaiting_slot


def _is_ready(draft: BookingDraft) -> bool:
    return draft.is_ready


def _has_required_fields(draft: BookingDraft) -> bool:
    return draft.has_required_fields()


@dataclass
class Transition:
    """A single valid state transition, optionally guarded on the draft."""
    from_state: FormState
    to_state: FormState
    trigger: FormTrigger
    guard: Optional[Callable[[BookingDraft], bool]] = None


@dataclass
class StateEntry:
    """Recorded history entry for a state visit."""
    state: FormState
    entered_at: datetime
    trigger: Optional[FormTrigger] = None


class InvalidTransitionError(Exception):
    """Raised when a transition is not valid from the current state."""


class BookingFormStateMachine:
    """
    Deterministic state machine controlling a booking form session.

    Transitions are tried in table order; the first whose trigger matches
    and whose guard accepts the draft wins. Anything else is rejected with
    the list of triggers valid from the current state.
    """

    TRANSITIONS: list[Transition] = [
        # --- Edits settle into slot_pending, ready, or editing ---
        Transition(FormState.EDITING, FormState.SLOT_PENDING, FormTrigger.EDIT, _awaiting_slot),
        Transition(FormState.EDITING, FormState.READY, FormTrigger.EDIT, _is_ready),
        Transition(FormState.EDITING, FormState.EDITING, FormTrigger.EDIT),

        Transition(FormState.SLOT_PENDING, FormState.SLOT_PENDING, FormTrigger.EDIT,
                   _awaiting_slot),
        Transition(FormState.SLOT_PENDING, FormState.READY, FormTrigger.EDIT, _is_ready),
        Transition(FormState.SLOT_PENDING, FormState.EDITING, FormTrigger.EDIT),

        Transition(FormState.READY, FormState.SLOT_PENDING, FormTrigger.EDIT, _awaiting_slot),
        Transition(FormState.READY, FormState.READY, FormTrigger.EDIT, _is_ready),
        Transition(FormState.READY, FormState.EDITING, FormTrigger.EDIT),

        # --- Submission gate: a preferred slot is optional ---
        Transition(FormState.EDITING, FormState.SUBMITTING, FormTrigger.SUBMIT,
                   _has_required_fields),
        Transition(FormState.SLOT_PENDING, FormState.SUBMITTING, FormTrigger.SUBMIT,
                   _has_required_fields),
        Transition(FormState.READY, FormState.SUBMITTING, FormTrigger.SUBMIT,
                   _has_required_fields),

        # --- Submission result ---
        Transition(FormState.SUBMITTING, FormState.SUBMITTED, FormTrigger.SUBMIT_SUCCEEDED),
        Transition(FormState.SUBMITTING, FormState.EDITING, FormTrigger.SUBMIT_FAILED),
    ]

    def __init__(self) -> None:
        self._current_state = FormState.EDITING
        self._history: list[StateEntry] = [
            StateEntry(state=FormState.EDITING, entered_at=datetime.now(timezone.utc))
        ]
        self._failure_count: int = 0

    @property
    def current_state(self) -> FormState:
        return self._current_state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    def transition(
        self, trigger: FormTrigger, draft: Optional[BookingDraft] = None
    ) -> FormState:
        """
        Execute a state transition.

        Args:
            trigger: The event triggering the transition.
            draft: The draft guards are evaluated against. Guarded
                transitions are skipped when no draft is given.

        Returns:
            The new form state.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        for t in self.TRANSITIONS:
            if t.from_state == self._current_state and t.trigger == trigger:
                if t.guard is not None and (draft is None or not t.guard(draft)):
                    continue

                old_state = self._current_state
                self._current_state = t.to_state

                self._history.append(StateEntry(
                    state=self._current_state,
                    entered_at=datetime.now(timezone.utc),
                    trigger=trigger,
                ))

                if trigger == FormTrigger.SUBMIT_FAILED:
                    self._failure_count += 1

                logger.debug(
                    "Form transition: %s -> %s (trigger: %s)",
                    old_state.value, self._current_state.value, trigger.value,
                )
                return self._current_state

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidTransitionError(
            f"No valid transition from '{self._current_state.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def get_valid_triggers(self) -> list[FormTrigger]:
        """Return the distinct triggers defined from the current state."""
        triggers: list[FormTrigger] = []
        for t in self.TRANSITIONS:
            if t.from_state == self._current_state and t.trigger not in triggers:
                triggers.append(t.trigger)
        return triggers

    def get_history(self) -> list[StateEntry]:
        """Return the full state transition history."""
        return list(self._history)

    def get_state_trace(self) -> list[str]:
        """Return ordered list of state names visited."""
        return [entry.state.value for entry in self._history]

    def is_terminal(self) -> bool:
        """Check if the form has been submitted."""
        return self._current_state == FormState.SUBMITTED
