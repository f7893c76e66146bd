"""Shared test fixtures and helpers."""

import dataclasses

import pytest

from fieldservice.booking.address import AddressResolution, StaticAddressResolver
from fieldservice.booking.form_state import BookingFormStateMachine
from fieldservice.booking.public_form import PublicBookingForm
from fieldservice.config import settings
from fieldservice.schemas.availability_schema import DailyAvailability, TimeSlot
from fieldservice.schemas.order_schema import BookingDraft
from fieldservice.services.memory_backend import InMemoryBackend
from fieldservice.services.seed import demo_state

MONDAY_SLOTS = [
    TimeSlot(start_time="09:00", end_time="10:00"),
    TimeSlot(start_time="10:00", end_time="11:00"),
]

COMPLETE_FIELDS = {
    "customer_name": "Ana Pérez",
    "customer_phone": "18095551234",
    "issue_description": "Washer does not drain",
}


@pytest.fixture
def availability():
    """Monday-only weekly table."""
    return [DailyAvailability(day_of_week=1, slots=MONDAY_SLOTS)]


@pytest.fixture
def backend():
    return InMemoryBackend(demo_state())


@pytest.fixture
def resolver():
    return StaticAddressResolver({
        "av. churchill 10": AddressResolution(
            address="Av. Churchill 10, Santo Domingo", latitude=18.47, longitude=-69.94,
        ),
        "calle sin mapa 4": AddressResolution(address="Calle Sin Mapa 4, Santiago"),
    })


@pytest.fixture
def app_config():
    """Settings with a maps key so the public page can load."""
    return dataclasses.replace(
        settings, maps=dataclasses.replace(settings.maps, api_key="test-key")
    )


@pytest.fixture
def form(availability, backend, resolver):
    return PublicBookingForm("cal_tech1", availability, backend, resolver=resolver)


@pytest.fixture
def state_machine():
    return BookingFormStateMachine()


def fill_required(form: PublicBookingForm) -> None:
    """Fill every required field with valid values."""
    form.update_fields(**COMPLETE_FIELDS)
    form.set_address_text("Calle El Conde 52")


def make_draft(**overrides) -> BookingDraft:
    """Helper to create a BookingDraft with every required field filled."""
    data = {
        "calendar_id": "cal_tech1",
        "customer_address": "Calle El Conde 52",
        **COMPLETE_FIELDS,
    }
    data.update(overrides)
    return BookingDraft(**data)
