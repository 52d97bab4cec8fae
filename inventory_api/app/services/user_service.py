"""
Business logic for users.

Email addresses are unique regardless of case.  Statistics include
the number of administrators.
"""

from typing import Any, Dict

from ..schemas.user import USER_STATUSES, UserCreate, UserRead, UserUpdate
from .base import BASE_FIELDS, EntityService

SEED_USERS = (
    {"name": "John Doe", "email": "john@example.com", "role": "user"},
    {"name": "Jane Smith", "email": "jane@example.com", "role": "admin"},
)


class UserService(EntityService[UserRead]):
    """Service for managing users."""

    entity_name = "User"
    plural_name = "users"
    object_type = "user"

    read_schema = UserRead
    create_schema = UserCreate
    update_schema = UserUpdate

    statuses = USER_STATUSES
    unique_fields = ("email",)
    search_fields = ("name", "email")
    filter_fields = ("status", "role")
    sort_fields = BASE_FIELDS + ("name", "email", "role")

    def initial_stats(self) -> Dict[str, Any]:
        return {"admins": 0}

    def tally(self, stats: Dict[str, Any], record: UserRead) -> None:
        if record.role == "admin":
            stats["admins"] += 1
