"""
Pydantic schemas for items.

An item is the simplest entity: a unique name and a status.
"""

from typing import Optional

from pydantic import field_validator

from ..core.validators import validate_choice, validate_text
from .common import CamelModel, RecordBase

ITEM_STATUSES = ("active", "archived", "deleted")


class ItemCreate(CamelModel):
    """Schema for creating an item."""

    name: str
    status: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v):
        return validate_text(v, "Item name", max_length=100)

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, v):
        return None if v is None else validate_choice(v, ITEM_STATUSES)


class ItemUpdate(CamelModel):
    """Schema for updating an item; only provided fields are applied."""

    name: Optional[str] = None
    status: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v):
        return validate_text(v, "Item name", max_length=100)

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, ITEM_STATUSES)


class ItemRead(RecordBase):
    """An item as stored and returned by the API."""

    name: str
