"""
Business logic for items.

Items only carry a unique name and a status, so the service is the
generic engine with its configuration filled in.
"""

from ..schemas.item import ITEM_STATUSES, ItemCreate, ItemRead, ItemUpdate
from .base import BASE_FIELDS, EntityService

SEED_ITEMS = (
    {"name": "First item"},
    {"name": "Another item"},
)


class ItemService(EntityService[ItemRead]):
    """Service for managing items."""

    entity_name = "Item"
    plural_name = "items"
    object_type = "item"

    read_schema = ItemRead
    create_schema = ItemCreate
    update_schema = ItemUpdate

    statuses = ITEM_STATUSES
    unique_fields = ("name",)
    search_fields = ("name",)
    sort_fields = BASE_FIELDS + ("name",)
