"""
Item endpoints.

Items only use the shared CRUD, query and bulk routes.
"""

from fastapi import APIRouter

from ...schemas.item import ItemRead
from ..deps import get_item_service
from .crud import include_crud_routes

router = APIRouter()

include_crud_routes(
    router,
    get_item_service,
    ItemRead,
    required_fields=("name",),
    required_message="Name is required",
)
