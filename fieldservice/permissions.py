"""Role-based access rules for the staff back office."""

from enum import Enum
from typing import Optional

from fieldservice.schemas.state_schema import StaffRole


class Action(str, Enum):
    VIEW = "view"
    NAVIGATE = "navigate"
    EDIT = "edit"
    DELETE = "delete"
    CREATE = "create"


class Resource(str, Enum):
    DASHBOARD = "dashboard"
    CALENDAR = "calendar"
    MY_ORDERS = "my_orders"
    TECHNICIAN_CALENDAR = "technician_calendar"
    UNCONFIRMED_APPOINTMENTS = "unconfirmed_appointments"
    MAINTENANCE = "maintenance"
    INVOICES = "invoices"
    QUOTES = "quotes"
    PRODUCTS = "products"
    BANK_ACCOUNTS = "bank_accounts"
    CUSTOMERS = "customers"
    CUSTOMER_MAP = "customer_map"
    STAFF = "staff"
    WORKSHOP = "workshop"
    CALENDARS = "calendars"
    COMPANY_SETTINGS = "company_settings"
    ACCESS_KEYS = "access_keys"
    SECRETARY_PERFORMANCE = "secretary_performance"
    TECHNICIAN_PERFORMANCE = "technician_performance"


SECRETARY_RESOURCES = frozenset({
    Resource.DASHBOARD, Resource.CALENDAR, Resource.UNCONFIRMED_APPOINTMENTS,
    Resource.MAINTENANCE, Resource.INVOICES, Resource.QUOTES, Resource.PRODUCTS,
    Resource.BANK_ACCOUNTS, Resource.CUSTOMERS, Resource.CUSTOMER_MAP,
    Resource.WORKSHOP, Resource.CALENDARS, Resource.COMPANY_SETTINGS,
})

TECHNICIAN_RESOURCES = frozenset({
    Resource.MY_ORDERS, Resource.TECHNICIAN_CALENDAR, Resource.UNCONFIRMED_APPOINTMENTS,
})


def can(role: Optional[StaffRole], action: Action, resource: Resource) -> bool:
    """
    Decide whether a staff role may perform ``action`` on ``resource``.

    Roles grant access per resource; the action does not narrow it further.
    """
    if role is None:
        return False
    if role == StaffRole.ADMINISTRATOR:
        return True
    if role == StaffRole.COORDINATOR:
        return resource != Resource.ACCESS_KEYS
    if role == StaffRole.SECRETARY:
        return resource in SECRETARY_RESOURCES
    if role == StaffRole.TECHNICIAN:
        return resource in TECHNICIAN_RESOURCES
    return False
