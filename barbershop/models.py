# barbershop/models.py

from typing import Optional
from datetime import datetime, timezone, date as Date
from decimal import Decimal

from sqlalchemy import Column, DateTime, Index, UniqueConstraint, text
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Category(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    type: str = Field(index=True)  # "service" or "product"


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: str
    price: Decimal = Field(max_digits=10, decimal_places=2)
    duration: int  # minutes
    category_id: Optional[int] = Field(default=None, foreign_key="category.id", index=True)


class Barber(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    title: str
    image_url: Optional[str] = None
    rating: Optional[Decimal] = Field(default=None, max_digits=3, decimal_places=1)


class Appointment(SQLModel, table=True):
    # One live booking per barber slot; cancelled rows free the slot again.
    __table_args__ = (
        Index(
            "uq_barber_slot",
            "barber_id", "date", "time",
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status != 'cancelled'"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    service_id: int = Field(foreign_key="service.id")
    barber_id: int = Field(foreign_key="barber.id", index=True)
    date: Date = Field(index=True)
    time: str  # "9:00 AM"
    time_of_day: str  # morning, afternoon or evening

    first_name: str
    last_name: str
    email: str
    phone: str
    notes: Optional[str] = None

    status: str = "pending"
    total_price: Decimal = Field(max_digits=10, decimal_places=2)
    stripe_payment_id: Optional[str] = None
    # always UTC; SQLite hands it back without tzinfo
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class Product(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: str
    price: Decimal = Field(max_digits=10, decimal_places=2)
    image_url: Optional[str] = None
    category_id: Optional[int] = Field(default=None, foreign_key="category.id", index=True)
    in_stock: bool = True
    is_best_seller: bool = False
    rating: Decimal = Field(default=Decimal("4.0"), max_digits=3, decimal_places=1)


class CartItem(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_product"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    cart_id: str = Field(index=True)
    product_id: int = Field(foreign_key="product.id")
    quantity: int = 1


class User(SQLModel, table=True):
    # Only the first registrant is admin
    __table_args__ = (
        Index(
            "uq_single_admin",
            "is_admin",
            unique=True,
            sqlite_where=text("is_admin"),
            postgresql_where=text("is_admin"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    password_hash: str
    is_admin: bool = False
