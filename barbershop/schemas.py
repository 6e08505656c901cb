# barbershop/schemas.py

from datetime import datetime, date as Date
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from barbershop.slots import parse_slot_time


class CamelModel(BaseModel):
    # snake_case in Python, camelCase on the wire
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class CategoryType(str, Enum):
    service = "service"
    product = "product"


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"


class TimeOfDay(str, Enum):
    morning = "morning"
    afternoon = "afternoon"
    evening = "evening"


# --- users ---

class UserCreate(CamelModel):
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=8, max_length=72)


class UserPublic(CamelModel):
    id: int
    username: str
    is_admin: bool


# --- catalog ---

class CategoryCreate(CamelModel):
    name: str = Field(min_length=1)
    type: CategoryType


class CategoryPublic(CamelModel):
    id: int
    name: str
    type: str


class ServiceCreate(CamelModel):
    name: str = Field(min_length=1)
    description: str
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    duration: int = Field(gt=0)
    category_id: Optional[int] = None


class ServicePublic(CamelModel):
    id: int
    name: str
    description: str
    price: Decimal
    duration: int
    category_id: Optional[int] = None


class BarberCreate(CamelModel):
    name: str = Field(min_length=1)
    title: str
    image_url: Optional[str] = None
    rating: Optional[Decimal] = Field(default=None, ge=0, le=5)


class BarberPublic(CamelModel):
    id: int
    name: str
    title: str
    image_url: Optional[str] = None
    rating: Optional[Decimal] = None


class ProductCreate(CamelModel):
    name: str = Field(min_length=1)
    description: str
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = None
    category_id: Optional[int] = None
    in_stock: bool = True
    is_best_seller: bool = False
    rating: Decimal = Field(default=Decimal("4.0"), ge=0, le=5)


class ProductPublic(CamelModel):
    id: int
    name: str
    description: str
    price: Decimal
    image_url: Optional[str] = None
    category_id: Optional[int] = None
    in_stock: bool
    is_best_seller: bool
    rating: Decimal


# --- appointments ---

class AppointmentCreate(CamelModel):
    service_id: int
    barber_id: int
    date: Date
    time: str
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    notes: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def coerce_calendar_day(cls, value):
        # Accept "2024-06-01", "2024-06-01T09:00:00Z", date or datetime;
        # all of them mean the same calendar day.
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        return value

    @field_validator("time")
    @classmethod
    def check_time_format(cls, value: str) -> str:
        parse_slot_time(value)
        return value.strip()


class AppointmentPublic(CamelModel):
    id: int
    service_id: int
    barber_id: int
    date: Date
    time: str
    time_of_day: TimeOfDay
    first_name: str
    last_name: str
    email: str
    phone: str
    notes: Optional[str] = None
    status: AppointmentStatus
    total_price: Decimal
    stripe_payment_id: Optional[str] = None
    created_at: datetime


class AppointmentReceipt(CamelModel):
    """What anyone holding an appointment id may see: no contact details."""
    id: int
    service_id: int
    barber_id: int
    date: Date
    time: str
    time_of_day: TimeOfDay
    first_name: str
    status: AppointmentStatus
    total_price: Decimal


class AppointmentStatusUpdate(CamelModel):
    status: AppointmentStatus


class GroupedTimeSlots(CamelModel):
    morning: List[str]
    afternoon: List[str]
    evening: List[str]


# --- cart ---

class CartItemCreate(CamelModel):
    cart_id: str = Field(min_length=1, max_length=100)
    product_id: int
    quantity: int = Field(default=1, ge=1)


class CartItemUpdate(CamelModel):
    quantity: int = Field(ge=1)


class CartItemPublic(CamelModel):
    id: int
    cart_id: str
    product_id: int
    quantity: int


class CartItemDetail(CartItemPublic):
    product: Optional[ProductPublic] = None


class CartSummary(CamelModel):
    cart_id: str
    item_count: int
    subtotal: Decimal
    shipping: Decimal
    total: Decimal


# --- payments ---

class AppointmentPaymentRequest(CamelModel):
    appointment_id: int


class ProductPaymentRequest(CamelModel):
    cart_id: str = Field(min_length=1)


class PaymentIntentResponse(CamelModel):
    client_secret: str
    amount: Decimal
