"""
Pydantic schemas for products.

Prices are rounded to two decimal places; stock is a non-negative
integer.  Products without a category are filed under
``Uncategorized``.
"""

from typing import Optional

from pydantic import field_validator

from ..core.validators import (
    validate_choice,
    validate_non_negative_int,
    validate_price,
    validate_text,
)
from .common import CamelModel, RecordBase

PRODUCT_STATUSES = ("active", "inactive", "discontinued")
DEFAULT_CATEGORY = "Uncategorized"


class ProductCreate(CamelModel):
    """Schema for creating a product."""

    name: str
    price: float
    category: str = DEFAULT_CATEGORY
    stock: int = 0
    status: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v):
        return validate_text(v, "Product name", max_length=200)

    @field_validator("price", mode="before")
    @classmethod
    def check_price(cls, v):
        return validate_price(v)

    @field_validator("category", mode="before")
    @classmethod
    def check_category(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_CATEGORY
        return validate_text(v, "Category", max_length=100)

    @field_validator("stock", mode="before")
    @classmethod
    def check_stock(cls, v):
        return 0 if v is None else validate_non_negative_int(v, "Stock")

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, v):
        return None if v is None else validate_choice(v, PRODUCT_STATUSES)


class ProductUpdate(CamelModel):
    """Schema for updating a product.

    All fields are optional; only provided fields will be updated.
    """

    name: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None
    stock: Optional[int] = None
    status: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v):
        return validate_text(v, "Product name", max_length=200)

    @field_validator("price", mode="before")
    @classmethod
    def check_price(cls, v):
        return validate_price(v)

    @field_validator("category", mode="before")
    @classmethod
    def check_category(cls, v):
        return validate_text(v, "Category", max_length=100)

    @field_validator("stock", mode="before")
    @classmethod
    def check_stock(cls, v):
        return validate_non_negative_int(v, "Stock")

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, PRODUCT_STATUSES)


class ProductRead(RecordBase):
    name: str
    price: float
    category: str
    stock: int
