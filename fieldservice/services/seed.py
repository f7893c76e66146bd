"""
Demo state for the console walkthrough.

Two calendars (one inactive), a returning customer, and a couple of
products, in the shape the backend stores them.
"""

from fieldservice.booking.address import AddressResolution, StaticAddressResolver
from fieldservice.schemas.availability_schema import DailyAvailability, TimeSlot
from fieldservice.schemas.state_schema import (
    AppState,
    Calendar,
    CompanyInfo,
    Customer,
    Product,
    Staff,
    StaffRole,
)

WEEKDAY_SLOTS = [
    TimeSlot(start_time="08:00", end_time="10:00"),
    TimeSlot(start_time="10:00", end_time="12:00"),
    TimeSlot(start_time="14:00", end_time="16:00"),
]
SATURDAY_SLOTS = [TimeSlot(start_time="09:00", end_time="12:00")]


def demo_state() -> AppState:
    availability = [
        DailyAvailability(day_of_week=day, slots=WEEKDAY_SLOTS) for day in range(1, 6)
    ]
    availability.append(DailyAvailability(day_of_week=6, slots=SATURDAY_SLOTS))

    return AppState(
        staff=[
            Staff(id="staff_admin", name="Laura Gómez", email="laura@example.com",
                  calendar_id="cal_admin", role=StaffRole.ADMINISTRATOR),
            Staff(id="staff_tech1", name="Carlos Méndez", email="carlos@example.com",
                  calendar_id="cal_tech1", role=StaffRole.TECHNICIAN),
        ],
        calendars=[
            Calendar(id="cal_tech1", name="Carlos - Field Service", user_id="staff_tech1",
                     availability=availability, active=True),
            Calendar(id="cal_admin", name="Office", user_id="staff_admin",
                     availability=[], active=False),
        ],
        customers=[
            Customer(id="cust_returning", name="María Rodríguez", phone="18095550101",
                     email="maria@example.com", address="Calle El Conde 52, Santo Domingo"),
        ],
        products=[
            Product(id="prod_1", code="REF-001", name="Compressor 1/4 HP",
                    purchase_price=85.0, sell_price1=140.0, stock=4, initial_stock=4),
            Product(id="prod_2", code="FIL-010", name="Water filter cartridge",
                    purchase_price=6.5, sell_price1=12.0, stock=30, initial_stock=30),
        ],
        company_info=CompanyInfo(name="Servicio Técnico Caribe", phone="18095550000",
                                 email="info@example.com"),
    )


def demo_resolver() -> StaticAddressResolver:
    return StaticAddressResolver({
        "av. winston churchill 1099": AddressResolution(
            address="Av. Winston Churchill 1099, Santo Domingo",
            latitude=18.4712,
            longitude=-69.9398,
        ),
        "calle sin mapa 4": AddressResolution(address="Calle Sin Mapa 4, Santiago"),
    })
