"""
Pydantic schemas for orders.

``total`` is not accepted from clients: the order service derives it
from ``price`` and ``quantity`` whenever either changes.
"""

from typing import Optional

from pydantic import field_validator

from ..core.validators import (
    validate_choice,
    validate_positive_int,
    validate_price,
    validate_text,
)
from .common import CamelModel, RecordBase

ORDER_STATUSES = ("pending", "processing", "shipped", "completed", "cancelled")


class OrderCreate(CamelModel):
    """Schema for placing an order."""

    customer_name: str
    product_id: int
    quantity: int
    price: float
    status: Optional[str] = None

    @field_validator("customer_name", mode="before")
    @classmethod
    def check_customer_name(cls, v):
        return validate_text(v, "Customer name", max_length=100)

    @field_validator("product_id", mode="before")
    @classmethod
    def check_product_id(cls, v):
        return validate_positive_int(v, "Product ID")

    @field_validator("quantity", mode="before")
    @classmethod
    def check_quantity(cls, v):
        return validate_positive_int(v, "Quantity")

    @field_validator("price", mode="before")
    @classmethod
    def check_price(cls, v):
        return validate_price(v, allow_zero=True)

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, v):
        return None if v is None else validate_choice(v, ORDER_STATUSES)


class OrderUpdate(CamelModel):
    customer_name: Optional[str] = None
    quantity: Optional[int] = None
    price: Optional[float] = None
    status: Optional[str] = None

    @field_validator("customer_name", mode="before")
    @classmethod
    def check_customer_name(cls, v):
        return validate_text(v, "Customer name", max_length=100)

    @field_validator("quantity", mode="before")
    @classmethod
    def check_quantity(cls, v):
        return validate_positive_int(v, "Quantity")

    @field_validator("price", mode="before")
    @classmethod
    def check_price(cls, v):
        return validate_price(v, allow_zero=True)

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, ORDER_STATUSES)


class OrderRead(RecordBase):
    customer_name: str
    product_id: int
    quantity: int
    price: float
    total: float
