"""
Address autocomplete collaborator contract.

In production the resolver wraps a third-party places/geocoding service
restricted to the configured country. The in-memory resolver here serves
the console demo and tests.
"""

import logging
from typing import Optional, Protocol

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class AddressResolution(BaseModel):
    """A selected address, with coordinates when the service has geometry."""
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_geometry(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class AddressResolver(Protocol):
    """Resolves free-text input to an address; may find nothing."""

    async def resolve(self, query: str) -> Optional[AddressResolution]:
        ...


class StaticAddressResolver:
    """Resolves from a fixed table keyed by lower-cased query text."""

    def __init__(self, entries: Optional[dict[str, AddressResolution]] = None) -> None:
        self._entries = {k.strip().lower(): v for k, v in (entries or {}).items()}

    def add(self, query: str, resolution: AddressResolution) -> None:
        self._entries[query.strip().lower()] = resolution

    async def resolve(self, query: str) -> Optional[AddressResolution]:
        result = self._entries.get(query.strip().lower())
        if result is None:
            logger.debug("No address match for %r", query)
        return result
