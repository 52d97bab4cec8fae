"""
Audit log endpoints.

Read-only access to the create, update and delete actions recorded
by the entity services, newest first.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ...schemas.audit import AuditLogRead
from ...services.audit_service import AuditService
from ..deps import get_audit_service

router = APIRouter()


@router.get("/logs", response_model=List[AuditLogRead])
async def list_audit_logs(
    object_type: Optional[str] = Query(None, alias="objectType", description="Filter by object type (item, order, ...)"),
    action: Optional[str] = Query(None, description="Filter by action (create, update, delete)"),
    object_id: Optional[int] = Query(None, alias="objectId"),
    limit: int = Query(100, ge=1, le=500, description="Maximum number of logs to return"),
    offset: int = Query(0, ge=0, description="Number of logs to skip"),
    service: AuditService = Depends(get_audit_service),
) -> List[AuditLogRead]:
    return service.list_logs(
        object_type=object_type,
        action=action,
        object_id=object_id,
        limit=limit,
        offset=offset,
    )
