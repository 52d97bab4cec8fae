"""
Product endpoints.

On top of the shared routes, products can be listed by category.
"""

from typing import List

from fastapi import APIRouter, Depends

from ...schemas.product import ProductRead
from ...services.product_service import ProductService
from ..deps import get_product_service
from .crud import include_crud_routes

router = APIRouter()


@router.get("/category/{category}", response_model=List[ProductRead])
async def list_by_category(
    category: str,
    service: ProductService = Depends(get_product_service),
) -> List[ProductRead]:
    """Products in ``category``, compared case-insensitively."""
    return service.get_by_category(category)


include_crud_routes(
    router,
    get_product_service,
    ProductRead,
    required_fields=("name", "price"),
    required_message="Name and price are required",
)
