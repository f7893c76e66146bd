"""
In-memory backend holding the shared state document.

In production this role is played by a hosted document store that applies
each create inside a transaction. Here a lock serialises writers and the
new state replaces the old one in a single assignment, so a failed write
leaves nothing behind.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from fieldservice.config import settings
from fieldservice.schemas.order_schema import (
    ActionLog,
    OrderAction,
    ServiceOrder,
    ServiceOrderStatus,
    UnconfirmedOrder,
)
from fieldservice.schemas.state_schema import AppState, Customer
from fieldservice.services.backend import BackendError
from fieldservice.utils import format_order_number

logger = logging.getLogger(__name__)


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:10]}"


class InMemoryBackend:
    """
    Backend implementation over a single in-process ``AppState``.

    ``fail_next_write`` makes the next write raise ``BackendError``
    without touching state, for exercising failure paths.
    """

    def __init__(self, state: Optional[AppState] = None) -> None:
        self._state = state
        self._lock = asyncio.Lock()
        self._fail_next: Optional[str] = None
        self.write_count = 0

    @property
    def state(self) -> Optional[AppState]:
        return self._state

    def fail_next_write(self, message: str = "Backend unavailable") -> None:
        self._fail_next = message

    def _check_injected_failure(self) -> None:
        if self._fail_next is not None:
            message, self._fail_next = self._fail_next, None
            raise BackendError(message)

    async def get_initial_state(self) -> Optional[AppState]:
        if self._state is None:
            return None
        return self._state.model_copy(deep=True)

    async def save_state(self, state: AppState) -> None:
        async with self._lock:
            self._check_injected_failure()
            self._state = state.model_copy(deep=True)
            self.write_count += 1
        logger.debug("State saved")

    async def add_unconfirmed_order(self, order: UnconfirmedOrder) -> None:
        async with self._lock:
            if self._state is None:
                raise BackendError("App state document does not exist")
            current = self._state

            customer = next(
                (c for c in current.customers if c.phone == order.customer_phone), None
            )
            customers = list(current.customers)
            if customer is None:
                customer = Customer(
                    id=_new_id("cust"),
                    name=order.customer_name,
                    phone=order.customer_phone,
                    email=order.customer_email,
                    address=order.customer_address,
                    latitude=order.latitude,
                    longitude=order.longitude,
                )
                customers.append(customer)

            number = current.last_service_order_number + 1
            now = datetime.now(timezone.utc)
            service_order = ServiceOrder(
                id=_new_id("so"),
                service_order_number=format_order_number(
                    number, settings.form.order_number_prefix, settings.form.order_number_width
                ),
                title=f"{order.appliance_type} - {order.customer_name}",
                customer_id=customer.id,
                customer_name=order.customer_name,
                customer_phone=order.customer_phone,
                customer_email=order.customer_email,
                customer_address=order.customer_address,
                calendar_id=order.calendar_id,
                start=order.start,
                end=order.end,
                latitude=order.latitude,
                longitude=order.longitude,
                appliance_type=order.appliance_type,
                issue_description=order.issue_description,
                status=ServiceOrderStatus.PENDING_CONFIRMATION,
                created_at=now,
                history=[ActionLog(
                    action=OrderAction.CREATED,
                    timestamp=now,
                    user_id=settings.business.public_form_user_id,
                    details="Appointment requested from the public form.",
                )],
            )

            customers = [
                c.model_copy(update={"service_history": [*c.service_history, service_order.id]})
                if c.id == customer.id else c
                for c in customers
            ]
            new_state = current.model_copy(update={
                "customers": customers,
                "service_orders": [*current.service_orders, service_order],
                "last_service_order_number": number,
            })

            self._check_injected_failure()
            self._state = new_state
            self.write_count += 1

        logger.info(
            "Unconfirmed order %s created for %s",
            service_order.service_order_number, order.customer_name,
        )
