"""
Public appointment-request form session.

Holds one visitor's draft, the slots available for the chosen date, and
the form state machine. Validation happens only at submit time; a failed
submission keeps every value the visitor entered.

Usage:
    form = PublicBookingForm(calendar.id, calendar.availability or [], backend)
    form.update_fields(customer_name="Ana Pérez", customer_phone="18095551234",
                       issue_description="Washer does not drain")
    form.select_address(AddressResolution(address="Av. Churchill 10"))
    form.select_date("2024-06-10")
    form.select_slot("09:00 - 10:00")
    result = await form.submit()
"""

import asyncio
from typing import Iterable, Optional, Union

from pydantic import BaseModel, Field

from fieldservice.booking.address import AddressResolution, AddressResolver
from fieldservice.booking.form_state import BookingFormStateMachine, FormState, FormTrigger
from fieldservice.config import settings
from fieldservice.logging_context import get_session_logger, new_session_id, set_session_id
from fieldservice.scheduling.availability import parse_slot_label, resolve_slots, slot_instants
from fieldservice.schemas.availability_schema import DailyAvailability, TimeSlot
from fieldservice.schemas.order_schema import BookingDraft, UnconfirmedOrder
from fieldservice.services.backend import BackendService
from fieldservice.utils import is_blank

logger = get_session_logger(__name__)

# Plain text fields a visitor types directly
TEXT_FIELDS = frozenset({
    "customer_name",
    "customer_phone",
    "customer_email",
    "appliance_type",
    "issue_description",
})

SUBMIT_FAILED_MESSAGE = (
    "We could not save your request. Please try again or contact support."
)


class FormClosedError(Exception):
    """Raised when a submitted or cancelled form is used again."""


class SubmissionResult(BaseModel):
    """Outcome of a submit attempt."""
    success: bool
    message: str
    missing_fields: list[str] = Field(default_factory=list)


class PublicBookingForm:
    """
    One public booking session over an immutable draft.

    Every operation builds a new ``BookingDraft`` and swaps it in whole,
    then lets the state machine settle. The form is single-use: after a
    successful submission or a cancel it refuses further input.
    """

    def __init__(
        self,
        calendar_id: str,
        availability: Iterable[DailyAvailability],
        backend: BackendService,
        resolver: Optional[AddressResolver] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self.session_id = session_id or new_session_id()
        self._availability = list(availability)
        self._backend = backend
        self._resolver = resolver
        self._draft = BookingDraft(calendar_id=calendar_id)
        self._available_slots: list[TimeSlot] = []
        self._sm = BookingFormStateMachine()
        self._closed = False
        self.error: Optional[str] = None

    @property
    def draft(self) -> BookingDraft:
        return self._draft

    @property
    def state(self) -> FormState:
        return self._sm.current_state

    @property
    def state_machine(self) -> BookingFormStateMachine:
        return self._sm

    @property
    def available_slots(self) -> list[TimeSlot]:
        return list(self._available_slots)

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def slot_message(self) -> Optional[str]:
        """Hint shown in place of the slot picker, or None when slots exist."""
        if is_blank(self._draft.selected_date):
            return "Select a date to see available times."
        if not self._available_slots:
            return "No times available for this day."
        return None

    def _is_editable(self) -> bool:
        return not self._closed and self._sm.current_state not in (
            FormState.SUBMITTING, FormState.SUBMITTED,
        )

    def _ensure_editable(self) -> None:
        set_session_id(self.session_id)
        if self._closed or self._sm.is_terminal():
            raise FormClosedError("This form has already been submitted or closed.")
        if self._sm.current_state == FormState.SUBMITTING:
            raise FormClosedError("A submission is in progress.")

    def _replace(self, **changes) -> None:
        # Rebuilt through validation; a bad value leaves the old draft in place
        self._draft = BookingDraft.model_validate({**self._draft.model_dump(), **changes})
        self._sm.transition(FormTrigger.EDIT, self._draft)

    def update_fields(self, **fields: Optional[str]) -> None:
        """Set typed text fields in one step. None clears a field."""
        self._ensure_editable()
        unknown = set(fields) - TEXT_FIELDS
        if unknown:
            raise ValueError(f"Not editable as text: {sorted(unknown)}")
        self._replace(**{name: value or "" for name, value in fields.items()})

    def select_date(self, value: str) -> list[TimeSlot]:
        """
        Choose a date, recomputing its slots and clearing any chosen slot.

        Returns:
            The slots available on that date (empty for a blank date).
        """
        self._ensure_editable()
        value = value or ""
        self._available_slots = resolve_slots(value, self._availability)
        self._replace(selected_date=value.strip(), selected_slot=None)
        logger.debug("Date %r selected, %d slots", value, len(self._available_slots))
        return self.available_slots

    def select_slot(self, slot: Union[TimeSlot, str]) -> None:
        """
        Choose one of the available slots for the selected date.

        Raises:
            ValueError: If no date is chosen or the slot is not offered.
        """
        self._ensure_editable()
        if is_blank(self._draft.selected_date):
            raise ValueError("Select a date before choosing a time.")
        chosen = parse_slot_label(slot) if isinstance(slot, str) else slot
        if chosen not in self._available_slots:
            raise ValueError(
                f"'{chosen.label}' is not available on {self._draft.selected_date}."
            )
        self._replace(selected_slot=chosen)

    def select_address(self, resolution: AddressResolution) -> None:
        """Apply an autocomplete pick: text and coordinates change together."""
        self._ensure_editable()
        self._replace(
            customer_address=resolution.address,
            latitude=resolution.latitude,
            longitude=resolution.longitude,
        )
        if not resolution.has_geometry:
            logger.debug("Address selected without geometry")

    def set_address_text(self, text: str) -> None:
        """Manual typing; coordinates from an earlier pick no longer apply."""
        self._ensure_editable()
        self._replace(customer_address=text, latitude=None, longitude=None)

    async def resolve_address(self, query: str) -> Optional[AddressResolution]:
        """
        Look up typed text with the address resolver.

        The typed text is kept as the address whatever happens; a match
        replaces it along with its coordinates. A resolver that does not
        answer within the configured timeout counts as no match.
        """
        self.set_address_text(query)
        if self._resolver is None:
            return None
        try:
            resolution = await asyncio.wait_for(
                self._resolver.resolve(query), timeout=settings.maps.lookup_timeout_sec
            )
        except asyncio.TimeoutError:
            logger.warning("Address lookup timed out for %r", query)
            return None
        except Exception:
            logger.exception("Address lookup failed for %r", query)
            return None
        if resolution is not None and self._is_editable():
            self.select_address(resolution)
        return resolution

    def missing_fields(self) -> list[str]:
        return self._draft.missing_fields()

    def build_order(self) -> UnconfirmedOrder:
        """Turn the draft into the payload handed to the backend."""
        draft = self._draft
        start = end = None
        if not is_blank(draft.selected_date) and draft.selected_slot is not None:
            start, end = slot_instants(draft.selected_date, draft.selected_slot)
        return UnconfirmedOrder(
            calendar_id=draft.calendar_id,
            customer_name=draft.customer_name,
            customer_phone=draft.customer_phone,
            customer_email=draft.customer_email,
            customer_address=draft.customer_address,
            appliance_type=draft.appliance_type,
            issue_description=draft.issue_description,
            latitude=draft.latitude,
            longitude=draft.longitude,
            start=start,
            end=end,
        )

    async def submit(self) -> SubmissionResult:
        """
        Validate and hand the draft to the backend in one call.

        Returns:
            A SubmissionResult. Missing required fields never reach the
            backend; a backend failure returns the form to editing with
            the draft untouched and ``error`` set.
        """
        self._ensure_editable()

        missing = self.missing_fields()
        if missing:
            message = f"Please complete all required fields: {', '.join(missing)}."
            self.error = message
            logger.info("Submission blocked, missing: %s", missing)
            return SubmissionResult(success=False, message=message, missing_fields=missing)

        self.error = None
        self._sm.transition(FormTrigger.SUBMIT, self._draft)
        try:
            order = self.build_order()
            await self._backend.add_unconfirmed_order(order)
        except Exception:
            logger.exception("Unconfirmed order submission failed")
            if self._closed:
                return SubmissionResult(success=False, message=SUBMIT_FAILED_MESSAGE)
            self._sm.transition(FormTrigger.SUBMIT_FAILED)
            self.error = SUBMIT_FAILED_MESSAGE
            return SubmissionResult(success=False, message=SUBMIT_FAILED_MESSAGE)

        if self._closed:
            logger.info("Submission completed after the form was closed")
            return SubmissionResult(success=True, message="Request sent.")

        self._sm.transition(FormTrigger.SUBMIT_SUCCEEDED)
        logger.info("Appointment request submitted for calendar %s", order.calendar_id)
        return SubmissionResult(
            success=True,
            message=(
                "Request sent. A coordinator will contact you shortly "
                "to confirm your appointment."
            ),
        )

    def clear_error(self) -> None:
        self.error = None

    def cancel(self) -> None:
        """Discard the draft. An in-flight submission finishes unobserved."""
        self._closed = True
        self._draft = BookingDraft(calendar_id=self._draft.calendar_id)
        self._available_slots = []
        logger.debug("Form session %s cancelled", self.session_id)
