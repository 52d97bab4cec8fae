"""
User endpoints.

Users are listed, searched (by name or email) and managed through
the shared routes; ``role`` works as a list filter.
"""

from fastapi import APIRouter

from ...schemas.user import UserRead
from ..deps import get_user_service
from .crud import include_crud_routes

router = APIRouter()

include_crud_routes(
    router,
    get_user_service,
    UserRead,
    required_fields=("name", "email"),
    required_message="Name and email are required",
)
