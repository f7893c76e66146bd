"""
Confirmation queue for appointment requests from the public form.

Public requests land as ``pending_confirmation`` orders. Staff review them
from a queue scoped by role and confirm each one, optionally adjusting the
schedule, which turns it into a regular ``pending`` order.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, model_validator

from fieldservice.permissions import Action, Resource, can
from fieldservice.schemas.order_schema import (
    ActionLog,
    OrderAction,
    ServiceOrder,
    ServiceOrderStatus,
)
from fieldservice.schemas.state_schema import Staff, StaffRole
from fieldservice.services.backend import BackendError, BackendService

logger = logging.getLogger(__name__)


class OrderConfirmation(BaseModel):
    """Adjustments a coordinator may make while confirming a request."""
    calendar_id: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    appliance_type: Optional[str] = None
    issue_description: Optional[str] = None

    @model_validator(mode="after")
    def _check_interval(self) -> "OrderConfirmation":
        if self.start is not None and self.end is not None and self.end <= self.start:
            raise ValueError("end must be after start")
        return self


def pending_confirmation_orders(
    orders: list[ServiceOrder], staff: Optional[Staff] = None
) -> list[ServiceOrder]:
    """
    Orders awaiting confirmation that ``staff`` should see.

    Technicians only see requests made on their own calendar; every other
    role sees the whole queue.
    """
    pending = [o for o in orders if o.status == ServiceOrderStatus.PENDING_CONFIRMATION]
    if staff is not None and staff.role == StaffRole.TECHNICIAN:
        return [o for o in pending if o.calendar_id == staff.calendar_id]
    return pending


async def confirm_service_order(
    backend: BackendService,
    order_id: str,
    staff: Staff,
    confirmation: Optional[OrderConfirmation] = None,
) -> ServiceOrder:
    """
    Confirm an unconfirmed order on behalf of ``staff``.

    The order becomes ``pending``, records who confirmed it, and gains a
    ``confirmed`` history entry. A customer created by the public form is
    attributed to the confirming staff member.

    Raises:
        PermissionError: If the role may not handle unconfirmed requests,
            or a technician confirms another calendar's request.
        BackendError: If the system state is missing.
        KeyError: If the order does not exist.
        ValueError: If the order is not awaiting confirmation.
    """
    if not can(staff.role, Action.EDIT, Resource.UNCONFIRMED_APPOINTMENTS):
        raise PermissionError(f"{staff.role.value} cannot confirm appointments")

    state = await backend.get_initial_state()
    if state is None:
        raise BackendError("App state document does not exist")
    order = next((o for o in state.service_orders if o.id == order_id), None)
    if order is None:
        raise KeyError(f"Service order {order_id} not found")
    if order.status != ServiceOrderStatus.PENDING_CONFIRMATION:
        raise ValueError(
            f"Order {order.service_order_number} is '{order.status.value}', "
            "not awaiting confirmation"
        )
    if staff.role == StaffRole.TECHNICIAN and order.calendar_id != staff.calendar_id:
        raise PermissionError("Technicians can only confirm requests on their own calendar")

    changes = confirmation.model_dump(exclude_none=True) if confirmation else {}
    confirmed = ServiceOrder.model_validate({
        **order.model_dump(),
        **changes,
        "status": ServiceOrderStatus.PENDING,
        "confirmed_by_id": staff.id,
        "created_by_id": order.created_by_id or staff.id,
        "history": [*order.history, ActionLog(
            action=OrderAction.CONFIRMED,
            timestamp=datetime.now(timezone.utc),
            user_id=staff.id,
        )],
    })

    customers = [
        c.model_copy(update={"created_by_id": staff.id})
        if c.id == order.customer_id and c.created_by_id is None else c
        for c in state.customers
    ]
    await backend.save_state(state.model_copy(update={
        "customers": customers,
        "service_orders": [confirmed if o.id == order_id else o for o in state.service_orders],
    }))
    logger.info("Order %s confirmed by %s", confirmed.service_order_number, staff.id)
    return confirmed
