"""
Business logic for product reviews.

Reviews are filtered by product or author and expose per-product
rating averages.
"""

from typing import Any, Dict, List

from ..core.validators import round_money, validate_id
from ..schemas.review import REVIEW_STATUSES, ReviewCreate, ReviewRead, ReviewUpdate
from .base import BASE_FIELDS, EntityService


class ReviewService(EntityService[ReviewRead]):
    """Service for handling product reviews."""

    entity_name = "Review"
    plural_name = "reviews"
    object_type = "review"

    read_schema = ReviewRead
    create_schema = ReviewCreate
    update_schema = ReviewUpdate

    statuses = REVIEW_STATUSES
    search_fields = ("comment",)
    pattern_field = "comment"
    filter_fields = ("status", "product_id", "user_id")
    sort_fields = BASE_FIELDS + ("product_id", "user_id", "rating")

    def get_by_product(self, product_id: Any) -> List[ReviewRead]:
        pid = validate_id(product_id)
        return [r for r in self.store.all() if r.product_id == pid]

    def get_average_rating(self, product_id: Any) -> Dict[str, Any]:
        """Average rating (two decimals) and review count for a product."""
        reviews = self.get_by_product(product_id)
        if not reviews:
            return {"average": 0, "count": 0}
        average = sum(r.rating for r in reviews) / len(reviews)
        return {"average": round_money(average), "count": len(reviews)}

    def initial_stats(self) -> Dict[str, Any]:
        return {"ratingSum": 0}

    def tally(self, stats: Dict[str, Any], record: ReviewRead) -> None:
        stats["ratingSum"] += record.rating

    def finish_stats(self, stats: Dict[str, Any], total: int) -> Dict[str, Any]:
        rating_sum = stats.pop("ratingSum")
        stats["averageRating"] = round_money(rating_sum / total) if total else 0
        return stats
