"""Booking draft, unconfirmed order payload, and service order records."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from fieldservice.schemas.availability_schema import WIRE_CONFIG, TimeSlot
from fieldservice.utils import is_blank

# Required on submission, in the order they are reported to the visitor
REQUIRED_FIELDS: dict[str, str] = {
    "customer_name": "name",
    "customer_phone": "phone",
    "issue_description": "issue description",
    "customer_address": "address",
}


class ServiceOrderStatus(str, Enum):
    """Lifecycle status of a service order."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    PENDING_CONFIRMATION = "pending_confirmation"
    WARRANTY = "warranty"
    UNSCHEDULED = "unscheduled"


class OrderAction(str, Enum):
    CREATED = "created"
    CONFIRMED = "confirmed"
    EDITED = "edited"
    RESCHEDULED = "rescheduled"
    CANCELLED = "cancelled"
    STATUS_CHANGED = "status_changed"


class ActionLog(BaseModel):
    """One entry in a service order's audit history."""
    model_config = WIRE_CONFIG

    action: OrderAction
    timestamp: datetime
    user_id: str
    details: Optional[str] = None


class BookingDraft(BaseModel):
    """
    Unpersisted booking request held by a single form session.

    Frozen: every change produces a new draft via ``model_copy`` so that
    related fields (address and coordinates, date and slot) always change
    together.
    """
    model_config = ConfigDict(frozen=True)

    calendar_id: str
    customer_name: str = ""
    customer_phone: str = ""
    customer_email: str = ""
    customer_address: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    appliance_type: str = ""
    issue_description: str = ""
    selected_date: str = ""
    selected_slot: Optional[TimeSlot] = None

    def missing_fields(self) -> list[str]:
        """Display names of required fields that are empty or whitespace."""
        return [
            display for name, display in REQUIRED_FIELDS.items()
            if is_blank(getattr(self, name))
        ]

    def has_required_fields(self) -> bool:
        return not self.missing_fields()

    @property
    def awaiting_slot(self) -> bool:
        """A date is chosen but no time slot yet."""
        return not is_blank(self.selected_date) and self.selected_slot is None

    @property
    def is_ready(self) -> bool:
        return self.has_required_fields() and not self.awaiting_slot


class UnconfirmedOrder(BaseModel):
    """Completed draft handed to the backend as a new unconfirmed record."""
    model_config = WIRE_CONFIG

    calendar_id: str
    customer_name: str
    customer_phone: str
    customer_email: str = ""
    customer_address: str
    appliance_type: str = ""
    issue_description: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class ServiceOrder(BaseModel):
    """Persisted service order record."""
    model_config = WIRE_CONFIG

    id: str
    service_order_number: str
    title: str
    customer_id: str
    customer_name: str
    customer_phone: str
    customer_address: str
    customer_email: Optional[str] = None
    calendar_id: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    appliance_type: str = ""
    issue_description: str = ""
    status: ServiceOrderStatus
    is_google_synced: bool = False
    created_at: datetime
    created_by_id: Optional[str] = None
    confirmed_by_id: Optional[str] = None
    history: list[ActionLog] = Field(default_factory=list)
