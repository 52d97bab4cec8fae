"""
Routes shared by every entity.

``include_crud_routes`` adds the standard REST surface (list, fetch,
create, update, delete, stats, search) plus the query and bulk routes
to an entity router.  Controllers here only check that required
fields are present and map outcomes to status codes; all validation
and business rules live in the service.  Service errors propagate to
the exception handlers installed by ``main.create_app``, which turn
them into ``{"error": ...}`` responses.

Static paths such as ``/stats`` are registered before ``/{record_id}``
so they are not captured by the id route.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence, Type

from fastapi import APIRouter, Body, Depends, Query, Request, status

from ...core.errors import ValidationError
from ...schemas.common import RecordBase
from ...services.base import EntityService

PAGING_PARAMS = ("page", "limit", "sortBy", "sort_by", "order")


def _present(payload: Dict[str, Any], field: str) -> bool:
    value = payload.get(field)
    if isinstance(value, str):
        return bool(value.strip())
    return value is not None


def require_fields(payload: Dict[str, Any], fields: Sequence[str], message: str) -> None:
    """Raise ``ValidationError(message)`` unless every field is present."""
    if not all(_present(payload, field) for field in fields):
        raise ValidationError(message)


def include_crud_routes(
    router: APIRouter,
    get_service: Callable[..., EntityService],
    read_schema: Type[RecordBase],
    required_fields: Sequence[str],
    required_message: str,
) -> APIRouter:
    """Register the shared routes on ``router`` and return it.

    ``required_fields`` are the camelCase body keys a create request
    must carry; ``required_message`` is the 400 message when one is
    missing.
    """

    @router.get("", response_model=None, summary="List records")
    async def list_records(
        request: Request,
        page: Optional[int] = Query(None, ge=1),
        limit: Optional[int] = Query(None, ge=1),
        sort_by: Optional[str] = Query(None, alias="sortBy"),
        order: str = Query("asc"),
        service: EntityService = Depends(get_service),
    ) -> Any:
        """List records, optionally filtered, sorted and paginated.

        Any query parameter naming a filterable field (``status``,
        ``category``, ...) filters the list.  Passing ``page`` or
        ``limit`` switches the response to ``{items, pagination}``.
        """
        params = {k: v for k, v in request.query_params.items() if k not in PAGING_PARAMS}
        filters = service.known_filters(params)
        if page is not None or limit is not None:
            return service.get_paginated(page or 1, limit, filters, sort_by, order)
        if sort_by:
            return service.get_sorted(sort_by, order, filters)
        return service.get_all(filters)

    @router.get("/stats", summary="Aggregate statistics")
    async def get_stats(service: EntityService = Depends(get_service)) -> Dict[str, Any]:
        return service.get_stats()

    @router.get("/search", response_model=List[read_schema], summary="Search records")
    async def search_records(
        q: Optional[str] = Query(None),
        service: EntityService = Depends(get_service),
    ) -> List[RecordBase]:
        if not q:
            raise ValidationError('Search query parameter "q" is required')
        return service.search(q)

    @router.get("/recent", response_model=List[read_schema], summary="Recently changed records")
    async def recent_records(
        days: Optional[float] = Query(None),
        field: str = Query("created", pattern="^(created|updated)$"),
        service: EntityService = Depends(get_service),
    ) -> List[RecordBase]:
        return service.get_recent(days, f"{field}_at")

    @router.get("/range", response_model=List[read_schema], summary="Records in a date range")
    async def records_in_range(
        start: Optional[str] = Query(None),
        end: Optional[str] = Query(None),
        field: str = Query("created", pattern="^(created|updated)$"),
        service: EntityService = Depends(get_service),
    ) -> List[RecordBase]:
        return service.get_by_date_range(start, end, f"{field}_at")

    @router.get("/pattern", response_model=List[read_schema], summary="Wildcard match")
    async def records_by_pattern(
        pattern: Optional[str] = Query(None),
        service: EntityService = Depends(get_service),
    ) -> List[RecordBase]:
        return service.get_by_pattern(pattern)

    @router.post("/lookup", response_model=None, summary="Fetch several records by id")
    async def lookup_records(
        body: Dict[str, Any] = Body(...),
        service: EntityService = Depends(get_service),
    ) -> Any:
        return service.get_by_ids(body.get("ids"))

    @router.post("/bulk", response_model=None, summary="Create several records")
    async def bulk_create(
        body: Dict[str, Any] = Body(...),
        service: EntityService = Depends(get_service),
    ) -> Any:
        """Create many records.

        Each entry succeeds or fails on its own unless
        ``transactional`` is true, in which case any failure rolls the
        whole request back.
        """
        return service.bulk_create(body.get("items"), transactional=bool(body.get("transactional")))

    @router.put("/bulk", response_model=None, summary="Update several records")
    async def bulk_update(
        body: Dict[str, Any] = Body(...),
        service: EntityService = Depends(get_service),
    ) -> Any:
        updates = body.get("updates")
        if body.get("validateFirst"):
            return service.bulk_update_validated(updates)
        return service.bulk_update(updates)

    @router.post("/bulk/delete", response_model=None, summary="Delete several records")
    async def bulk_delete(
        body: Dict[str, Any] = Body(...),
        service: EntityService = Depends(get_service),
    ) -> Any:
        return service.bulk_delete(body.get("ids"))

    @router.post("/batch", response_model=None, summary="Atomic batch of operations")
    async def batch_operations(
        body: Dict[str, Any] = Body(...),
        service: EntityService = Depends(get_service),
    ) -> Any:
        return service.batch(body.get("operations"))

    @router.get("/{record_id}", response_model=read_schema, summary="Get a single record")
    async def get_record(
        record_id: str,
        service: EntityService = Depends(get_service),
    ) -> RecordBase:
        return service.get_by_id(record_id)

    @router.post(
        "",
        response_model=read_schema,
        status_code=status.HTTP_201_CREATED,
        summary="Create a record",
    )
    async def create_record(
        payload: Dict[str, Any] = Body(...),
        service: EntityService = Depends(get_service),
    ) -> RecordBase:
        require_fields(payload, required_fields, required_message)
        return service.create(payload)

    @router.api_route(
        "/{record_id}",
        methods=["PUT", "PATCH"],
        response_model=read_schema,
        summary="Update a record",
    )
    async def update_record(
        record_id: str,
        payload: Dict[str, Any] = Body(...),
        service: EntityService = Depends(get_service),
    ) -> RecordBase:
        """Partial update: fields absent from the body remain unchanged."""
        return service.update(record_id, payload)

    @router.delete(
        "/{record_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete a record",
    )
    async def delete_record(
        record_id: str,
        service: EntityService = Depends(get_service),
    ) -> None:
        service.delete(record_id)
        return None

    return router
