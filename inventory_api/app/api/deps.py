"""
FastAPI dependencies resolving the services built at start-up.
"""

from fastapi import Depends, Request

from ..services.audit_service import AuditService
from ..services.item_service import ItemService
from ..services.order_service import OrderService
from ..services.product_service import ProductService
from ..services.registry import ServiceRegistry
from ..services.review_service import ReviewService
from ..services.user_service import UserService


def get_services(request: Request) -> ServiceRegistry:
    return request.app.state.services


def get_audit_service(services: ServiceRegistry = Depends(get_services)) -> AuditService:
    return services.audit


def get_item_service(services: ServiceRegistry = Depends(get_services)) -> ItemService:
    return services.items


def get_user_service(services: ServiceRegistry = Depends(get_services)) -> UserService:
    return services.users


def get_product_service(services: ServiceRegistry = Depends(get_services)) -> ProductService:
    return services.products


def get_order_service(services: ServiceRegistry = Depends(get_services)) -> OrderService:
    return services.orders


def get_review_service(services: ServiceRegistry = Depends(get_services)) -> ReviewService:
    return services.reviews
