"""
Review endpoints.

Reviews can be listed per product and a product's average rating can
be fetched; everything else goes through the shared routes.  Use the
``productId`` or ``userId`` query parameters to filter the list.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from ...schemas.review import ReviewRead
from ...services.review_service import ReviewService
from ..deps import get_review_service
from .crud import include_crud_routes

router = APIRouter()


@router.get("/product/{product_id}", response_model=List[ReviewRead])
async def list_product_reviews(
    product_id: str,
    service: ReviewService = Depends(get_review_service),
) -> List[ReviewRead]:
    return service.get_by_product(product_id)


@router.get("/product/{product_id}/rating")
async def product_rating(
    product_id: str,
    service: ReviewService = Depends(get_review_service),
) -> Dict[str, Any]:
    """Average rating and number of reviews for a product."""
    return service.get_average_rating(product_id)


include_crud_routes(
    router,
    get_review_service,
    ReviewRead,
    required_fields=("productId", "userId", "rating"),
    required_message="Product ID, User ID, and rating are required",
)
