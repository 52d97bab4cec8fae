"""
Order endpoints.

Adds lookups by customer and product, a total-value range filter and
grouping by status or customer to the shared routes.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from ...core.errors import ValidationError
from ...schemas.order import OrderRead
from ...services.order_service import OrderService
from ..deps import get_order_service
from .crud import include_crud_routes

router = APIRouter()

GROUP_FIELDS = {"status": "status", "customer": "customer_name"}


@router.get("/total-range", response_model=List[OrderRead])
async def list_by_total_range(
    min_total: Optional[str] = Query(None, alias="min"),
    max_total: Optional[str] = Query(None, alias="max"),
    service: OrderService = Depends(get_order_service),
) -> List[OrderRead]:
    """Orders whose total lies within ``[min, max]``; both bounds optional."""
    return service.get_by_total_range(min_total, max_total)


@router.get("/customer/{customer_name}", response_model=List[OrderRead])
async def list_by_customer(
    customer_name: str,
    service: OrderService = Depends(get_order_service),
) -> List[OrderRead]:
    return service.get_by_customer(customer_name)


@router.get("/product/{product_id}", response_model=List[OrderRead])
async def list_by_product(
    product_id: str,
    service: OrderService = Depends(get_order_service),
) -> List[OrderRead]:
    return service.get_by_product(product_id)


@router.get("/grouped/{group}", response_model=Dict[str, List[OrderRead]])
async def grouped_orders(
    group: str,
    service: OrderService = Depends(get_order_service),
) -> Dict[Any, List[OrderRead]]:
    """Orders grouped by ``status`` or by ``customer`` (lower-cased name)."""
    if group not in GROUP_FIELDS:
        raise ValidationError(
            f"Invalid group field. Must be one of: {', '.join(GROUP_FIELDS)}"
        )
    return service.group_by(GROUP_FIELDS[group])


include_crud_routes(
    router,
    get_order_service,
    OrderRead,
    required_fields=("customerName", "productId", "quantity", "price"),
    required_message="Customer name, product ID, quantity and price are required",
)
