"""
Construction of the per-entity services.

The application factory builds exactly one ``ServiceRegistry`` and
stores it on ``app.state``; endpoints reach their service through it.
Each service gets its own ``EntityStore`` and all of them share one
``AuditService``.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from .audit_service import AuditService, utcnow
from .item_service import SEED_ITEMS, ItemService
from .order_service import SEED_ORDERS, OrderService
from .product_service import SEED_PRODUCTS, ProductService
from .review_service import ReviewService
from .user_service import SEED_USERS, UserService


@dataclass
class ServiceRegistry:
    audit: AuditService
    items: ItemService
    users: UserService
    products: ProductService
    orders: OrderService
    reviews: ReviewService

    @classmethod
    def build(
        cls,
        seed: bool = False,
        clock: Callable[[], datetime] = utcnow,
        max_batch_size: int = 0,
    ) -> "ServiceRegistry":
        """Create fresh, empty stores (plus sample data if ``seed``)."""
        audit = AuditService(clock=clock)
        options = {"audit": audit, "clock": clock, "max_batch_size": max_batch_size or None}
        registry = cls(
            audit=audit,
            items=ItemService(**options),
            users=UserService(**options),
            products=ProductService(**options),
            orders=OrderService(**options),
            reviews=ReviewService(**options),
        )
        if seed:
            registry.items.seed(SEED_ITEMS)
            registry.users.seed(SEED_USERS)
            registry.products.seed(SEED_PRODUCTS)
            registry.orders.seed(SEED_ORDERS)
        return registry
