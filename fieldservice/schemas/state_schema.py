"""Backend state records: customers, staff, calendars, products, company."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from fieldservice.schemas.availability_schema import WIRE_CONFIG, DailyAvailability
from fieldservice.schemas.order_schema import ServiceOrder


class StaffRole(str, Enum):
    ADMINISTRATOR = "administrator"
    COORDINATOR = "coordinator"
    TECHNICIAN = "technician"
    SECRETARY = "secretary"


class Customer(BaseModel):
    """Customer record, matched by phone when public requests arrive."""
    model_config = WIRE_CONFIG

    id: str
    name: str
    phone: str
    email: str = ""
    address: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    service_history: list[str] = Field(default_factory=list)
    created_by_id: Optional[str] = None


class Staff(BaseModel):
    model_config = WIRE_CONFIG

    id: str
    name: str
    email: str
    calendar_id: str
    role: StaffRole


class Calendar(BaseModel):
    """A staff member's calendar and the weekly availability it publishes."""
    model_config = WIRE_CONFIG

    id: str
    name: str
    user_id: str
    color: str = "#0284c7"
    availability: Optional[list[DailyAvailability]] = None
    active: Optional[bool] = None


class CompanyInfo(BaseModel):
    model_config = WIRE_CONFIG

    name: str
    address: str = ""
    phone: str = ""
    whatsapp: str = ""
    email: str = ""
    logo_url: Optional[str] = None


class Product(BaseModel):
    """Inventory item; ``code`` is unique across the catalog."""
    model_config = WIRE_CONFIG

    id: str
    code: str
    name: str
    type: str = "inventory"
    purchase_price: float = 0.0
    sell_price1: float = 0.0
    sell_price2: float = 0.0
    sell_price3: float = 0.0
    stock: int = 0
    initial_stock: Optional[int] = None


class AppState(BaseModel):
    """The single shared state document kept by the backend."""
    model_config = WIRE_CONFIG

    staff: list[Staff] = Field(default_factory=list)
    customers: list[Customer] = Field(default_factory=list)
    calendars: list[Calendar] = Field(default_factory=list)
    service_orders: list[ServiceOrder] = Field(default_factory=list)
    products: list[Product] = Field(default_factory=list)
    last_service_order_number: int = 0
    company_info: Optional[CompanyInfo] = None
