"""
Backend collaborator contract.

The core never talks to a storage engine directly. Everything it reads or
writes goes through these operations, so a hosted document store in
production and ``InMemoryBackend`` in tests are interchangeable.
"""

from typing import Optional, Protocol

from fieldservice.schemas.order_schema import UnconfirmedOrder
from fieldservice.schemas.state_schema import AppState


class BackendError(Exception):
    """Raised when the backend cannot complete a read or write."""


class BackendService(Protocol):
    """Capability set the booking core depends on."""

    async def get_initial_state(self) -> Optional[AppState]:
        """Return the shared state, or None if the system is not configured."""
        ...

    async def add_unconfirmed_order(self, order: UnconfirmedOrder) -> None:
        """Create an unconfirmed service order; all-or-nothing."""
        ...

    async def save_state(self, state: AppState) -> None:
        """Replace the shared state document."""
        ...
