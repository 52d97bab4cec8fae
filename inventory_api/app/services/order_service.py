"""
Business logic for orders.

An order's ``total`` is ``price * quantity`` rounded to cents.  It is
computed on creation and recomputed whenever an update changes the
price or the quantity.
"""

import math
from typing import Any, Dict, List, Optional

from ..core.errors import ValidationError
from ..core.validators import round_money, validate_id
from ..schemas.order import ORDER_STATUSES, OrderCreate, OrderRead, OrderUpdate
from .base import BASE_FIELDS, EntityService

SEED_ORDERS = (
    {"customerName": "Alice Johnson", "productId": 1, "quantity": 2, "price": 999.99},
    {
        "customerName": "Bob Smith",
        "productId": 2,
        "quantity": 1,
        "price": 49.99,
        "status": "completed",
    },
)


def _to_bound(value: Any, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Total range values must be numbers") from None
    if math.isnan(number):
        raise ValidationError("Total range values must be numbers")
    return number


class OrderService(EntityService[OrderRead]):
    """Service for managing orders."""

    entity_name = "Order"
    plural_name = "orders"
    object_type = "order"

    read_schema = OrderRead
    create_schema = OrderCreate
    update_schema = OrderUpdate

    statuses = ORDER_STATUSES
    search_fields = ("customer_name",)
    pattern_field = "customer_name"
    filter_fields = ("status", "product_id", "customer_name")
    casefold_filters = ("customer_name",)
    sort_fields = BASE_FIELDS + ("customer_name", "product_id", "quantity", "price", "total")

    def prepare_create(self, values: Dict[str, Any]) -> Dict[str, Any]:
        values["total"] = round_money(values["price"] * values["quantity"])
        return values

    def prepare_update(self, record: OrderRead, changes: Dict[str, Any]) -> Dict[str, Any]:
        if "price" in changes or "quantity" in changes:
            price = changes.get("price", record.price)
            quantity = changes.get("quantity", record.quantity)
            changes["total"] = round_money(price * quantity)
        return changes

    def get_by_customer(self, customer_name: str) -> List[OrderRead]:
        """Orders whose customer name matches exactly, ignoring case."""
        name = (customer_name or "").strip().lower()
        return [o for o in self.store.all() if o.customer_name.lower() == name]

    def get_by_product(self, product_id: Any) -> List[OrderRead]:
        pid = validate_id(product_id)
        return [o for o in self.store.all() if o.product_id == pid]

    def get_by_total_range(
        self,
        min_total: Optional[Any] = None,
        max_total: Optional[Any] = None,
    ) -> List[OrderRead]:
        low = _to_bound(min_total, 0.0)
        high = _to_bound(max_total, math.inf)
        if low < 0 or high < 0:
            raise ValidationError("Total range values must be non-negative")
        if low > high:
            raise ValidationError("Minimum total cannot be greater than maximum total")
        return [o for o in self.store.all() if low <= o.total <= high]

    def initial_stats(self) -> Dict[str, Any]:
        return {"totalValue": 0.0}

    def tally(self, stats: Dict[str, Any], record: OrderRead) -> None:
        stats["totalValue"] += record.total

    def finish_stats(self, stats: Dict[str, Any], total: int) -> Dict[str, Any]:
        value = stats["totalValue"]
        stats["totalValue"] = round_money(value)
        stats["averageOrderValue"] = round_money(value / total) if total else 0
        return stats
