"""
Top‑level API router.

Aggregates the entity routers under their collection prefixes.  When
a new entity is added, include its router here.
"""

from fastapi import APIRouter

from .endpoints import audit, items, orders, products, reviews, users

router = APIRouter()

router.include_router(items.router, prefix="/items", tags=["items"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(products.router, prefix="/products", tags=["products"])
router.include_router(orders.router, prefix="/orders", tags=["orders"])
router.include_router(reviews.router, prefix="/reviews", tags=["reviews"])
router.include_router(audit.router, prefix="/audit", tags=["audit"])
