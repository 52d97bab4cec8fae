"""
Business logic for products.

Products are filtered by category case-insensitively.  Statistics add
stock and inventory value totals and the list of known categories.
"""

from typing import Any, Dict, List

from ..core.validators import round_money
from ..schemas.product import PRODUCT_STATUSES, ProductCreate, ProductRead, ProductUpdate
from .base import BASE_FIELDS, EntityService

SEED_PRODUCTS = (
    {"name": "Laptop", "price": 999.99, "category": "Electronics", "stock": 15},
    {"name": "Coffee Maker", "price": 49.99, "category": "Appliances", "stock": 30},
)


class ProductService(EntityService[ProductRead]):
    """Service for managing products."""

    entity_name = "Product"
    plural_name = "products"
    object_type = "product"

    read_schema = ProductRead
    create_schema = ProductCreate
    update_schema = ProductUpdate

    statuses = PRODUCT_STATUSES
    unique_fields = ("name",)
    search_fields = ("name", "category")
    filter_fields = ("status", "category")
    casefold_filters = ("category",)
    sort_fields = BASE_FIELDS + ("name", "price", "stock", "category")

    def get_by_category(self, category: str) -> List[ProductRead]:
        """Return products in ``category`` (case-insensitive)."""
        return self.get_all({"category": category}) if category else []

    def initial_stats(self) -> Dict[str, Any]:
        return {"totalStock": 0, "totalValue": 0.0, "categories": []}

    def tally(self, stats: Dict[str, Any], record: ProductRead) -> None:
        stats["totalStock"] += record.stock
        stats["totalValue"] += record.price * record.stock
        if record.category not in stats["categories"]:
            stats["categories"].append(record.category)

    def finish_stats(self, stats: Dict[str, Any], total: int) -> Dict[str, Any]:
        stats["totalValue"] = round_money(stats["totalValue"])
        return stats
