"""
Audit service for recording and querying entity mutations.

Every entity service writes an entry here after a successful create,
update or delete.  Entries are kept in memory for the lifetime of
the process and can be listed newest first with optional filters
and pagination.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from ..schemas.audit import AuditLogRead

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditService:
    """Append-only, in-memory audit trail."""

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._entries: List[AuditLogRead] = []
        self._next_id = 1
        self._clock = clock

    def __len__(self) -> int:
        return len(self._entries)

    def log(
        self,
        action: str,
        object_type: str,
        object_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> AuditLogRead:
        """Record a new audit entry.

        Parameters
        ----------
        action : str
            Short description of the action ("create", "update", "delete").
        object_type : str
            Type of object affected (e.g. "item", "order").
        object_id : Optional[int]
            Identifier of the affected record, if applicable.
        details : Optional[dict]
            Additional structured data about the action.
        """
        entry = AuditLogRead(
            id=self._next_id,
            action=action,
            object_type=object_type,
            object_id=object_id,
            timestamp=self._clock(),
            details=details or None,
        )
        self._next_id += 1
        self._entries.append(entry)
        logger.debug("audit %s %s %s", action, object_type, object_id)
        return entry

    def mark(self) -> int:
        """Return a position that :meth:`discard_after` can rewind to."""
        return len(self._entries)

    def discard_after(self, mark: int) -> None:
        """Drop entries written after ``mark`` (used when a batch rolls back)."""
        del self._entries[mark:]

    def list_logs(
        self,
        object_type: Optional[str] = None,
        action: Optional[str] = None,
        object_id: Optional[int] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[AuditLogRead]:
        """Retrieve audit entries, newest first, with optional filters."""
        entries = [
            entry
            for entry in reversed(self._entries)
            if (object_type is None or entry.object_type == object_type)
            and (action is None or entry.action == action)
            and (object_id is None or entry.object_id == object_id)
        ]
        return entries[offset:offset + limit]
