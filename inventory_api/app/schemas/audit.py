"""
Pydantic schema for audit log entries.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import ConfigDict

from .common import CamelModel


class AuditLogRead(CamelModel):
    """One recorded create, update or delete."""

    model_config = ConfigDict(frozen=True)

    id: int
    action: str
    object_type: str
    object_id: Optional[int] = None
    timestamp: datetime
    details: Optional[Dict[str, Any]] = None
