"""
Pydantic schemas for product reviews.

Reviews start as ``pending`` and are moved to ``approved`` or
``rejected`` by updating their status.  Comments are trimmed and
limited to 1000 characters.
"""

from typing import Optional

from pydantic import field_validator

from ..core.validators import (
    validate_choice,
    validate_optional_text,
    validate_positive_int,
    validate_rating,
)
from .common import CamelModel, RecordBase

REVIEW_STATUSES = ("pending", "approved", "rejected")


class ReviewCreate(CamelModel):
    """Schema for creating a new review."""

    product_id: int
    user_id: int
    rating: int
    comment: str = ""
    status: Optional[str] = None

    @field_validator("product_id", mode="before")
    @classmethod
    def check_product_id(cls, v):
        return validate_positive_int(v, "Product ID")

    @field_validator("user_id", mode="before")
    @classmethod
    def check_user_id(cls, v):
        return validate_positive_int(v, "User ID")

    @field_validator("rating", mode="before")
    @classmethod
    def check_rating(cls, v):
        return validate_rating(v)

    @field_validator("comment", mode="before")
    @classmethod
    def sanitize_comment(cls, v):
        """Trim whitespace from the comment and enforce a maximum length."""
        return validate_optional_text(v, "Comment", max_length=1000)

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, v):
        return None if v is None else validate_choice(v, REVIEW_STATUSES)


class ReviewUpdate(CamelModel):
    rating: Optional[int] = None
    comment: Optional[str] = None
    status: Optional[str] = None

    @field_validator("rating", mode="before")
    @classmethod
    def check_rating(cls, v):
        return validate_rating(v)

    @field_validator("comment", mode="before")
    @classmethod
    def sanitize_comment(cls, v):
        return validate_optional_text(v, "Comment", max_length=1000)

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, REVIEW_STATUSES)


class ReviewRead(RecordBase):
    product_id: int
    user_id: int
    rating: int
    comment: str
