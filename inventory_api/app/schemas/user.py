"""
Pydantic schemas for users.

Users are identified by a unique, case-insensitive email address.
Email values are normalised to lower case before they are stored.
"""

from typing import Optional

from pydantic import field_validator

from ..core.validators import validate_choice, validate_email, validate_text
from .common import CamelModel, RecordBase

USER_STATUSES = ("active", "inactive", "suspended")
USER_ROLES = ("user", "admin", "moderator")


class UserCreate(CamelModel):
    """Schema for registering a user.  ``role`` defaults to ``user``."""

    name: str
    email: str
    role: str = "user"
    status: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v):
        return validate_text(v, "User name", max_length=100)

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("role", mode="before")
    @classmethod
    def check_role(cls, v):
        return "user" if v is None else validate_choice(v, USER_ROLES, label="role")

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, v):
        return None if v is None else validate_choice(v, USER_STATUSES)


class UserUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v):
        return validate_text(v, "User name", max_length=100)

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("role", mode="before")
    @classmethod
    def check_role(cls, v):
        return validate_choice(v, USER_ROLES, label="role")

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, USER_STATUSES)


class UserRead(RecordBase):
    name: str
    email: str
    role: str
