"""
Main entrypoint for the Inventory API.

This module assembles the FastAPI application: it sets up logging,
builds the entity services, installs the error handlers and includes
the API router.  The ``create_app`` function builds and configures
the app, which is then instantiated at module import time as
``app``, e.g.::

    uvicorn inventory_api.app.main:app --reload

Every error leaves the API as ``{"error": "<message>"}`` with the
status code of its class: service errors carry their own, request
validation failures are 400 and anything unexpected is a 500 whose
details only go to the log.
"""

import logging
import time
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.router import router as api_router
from .core.config import settings
from .core.errors import ServiceError
from .core.logging_config import get_request_logger, setup_logging
from .schemas.common import describe_errors
from .services.registry import ServiceRegistry

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def install_error_handlers(app: FastAPI) -> None:
    """Translate every failure into an ``{"error": ...}`` JSON body."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(status.HTTP_400_BAD_REQUEST, describe_errors(exc.errors()))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app(seed: Optional[bool] = None, services: Optional[ServiceRegistry] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    seed : Optional[bool]
        Load the sample records into the stores.  Defaults to
        ``settings.seed_data``.
    services : Optional[ServiceRegistry]
        Pre-built services to serve.  When omitted, a fresh registry
        with empty stores is built for this application instance.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Initialise logging before anything else so that the service
    # construction below can log.
    setup_logging(
        settings.log_level,
        settings.log_file or None,
        request_level=settings.request_log_level or None,
    )

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    if services is None:
        services = ServiceRegistry.build(
            seed=settings.seed_data if seed is None else seed,
            max_batch_size=settings.max_batch_size,
        )
    app.state.services = services

    install_error_handlers(app)

    request_logger = get_request_logger()

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        request_logger.info(
            "%s %s %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    app.include_router(api_router, prefix=settings.api_prefix)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
