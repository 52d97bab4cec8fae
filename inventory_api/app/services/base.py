"""
Generic CRUD-with-validation engine.

``EntityService`` implements every operation an entity exposes
(CRUD, filtering, search, sorting, pagination, date-range queries,
statistics and bulk/batch mutations) once.  Concrete services
subclass it and only declare their configuration: schemas, valid
statuses, unique fields, searchable fields and, where needed, a few
hooks for derived fields and extra statistics.

Each service owns one :class:`EntityStore`.  All operations are
synchronous in-memory mutations; a failed operation raises a
:class:`ServiceError` subclass and leaves the store untouched.
"""

from __future__ import annotations

import logging
import math
import re
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import (
    Any,
    Callable,
    ClassVar,
    Dict,
    Generic,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
)

from pydantic import BaseModel

from ..core.config import settings
from ..core.errors import NotFoundError, ServiceError, ValidationError
from ..core.store import EntityStore
from ..core.validators import parse_datetime, validate_id, validate_pattern
from ..schemas.common import RecordBase, decode
from .audit_service import AuditService, utcnow

logger = logging.getLogger(__name__)

ReadT = TypeVar("ReadT", bound=RecordBase)

SORT_ORDERS = ("asc", "desc")
BASE_FIELDS = ("id", "status", "created_at", "updated_at")


def _sort_key(value: Any) -> Tuple[bool, Any]:
    if isinstance(value, str):
        value = value.lower()
    return (value is not None, value)


def _wildcard_regex(pattern: str) -> "re.Pattern[str]":
    """Translate ``*`` and ``?`` wildcards into a case-insensitive regex."""
    escaped = re.escape(pattern).replace(r"\*", ".*").replace(r"\?", ".")
    return re.compile(escaped, re.IGNORECASE)


class EntityService(Generic[ReadT]):
    """Service for one entity's in-memory collection.

    Class attributes configure the entity; see the concrete services
    in this package for examples.
    """

    entity_name: ClassVar[str] = "Record"
    plural_name: ClassVar[str] = "records"
    object_type: ClassVar[str] = "record"

    read_schema: ClassVar[Type[RecordBase]]
    create_schema: ClassVar[Type[BaseModel]]
    update_schema: ClassVar[Type[BaseModel]]

    # The first status is the one new records receive by default.
    statuses: ClassVar[Tuple[str, ...]] = ("active",)
    unique_fields: ClassVar[Tuple[str, ...]] = ()
    search_fields: ClassVar[Tuple[str, ...]] = ()
    pattern_field: ClassVar[str] = "name"
    filter_fields: ClassVar[Tuple[str, ...]] = ("status",)
    casefold_filters: ClassVar[Tuple[str, ...]] = ()
    sort_fields: ClassVar[Tuple[str, ...]] = BASE_FIELDS

    def __init__(
        self,
        store: Optional[EntityStore[ReadT]] = None,
        audit: Optional[AuditService] = None,
        clock: Callable[[], datetime] = utcnow,
        max_batch_size: Optional[int] = None,
    ) -> None:
        self.store: EntityStore[ReadT] = store if store is not None else EntityStore()
        self.audit = audit if audit is not None else AuditService(clock=clock)
        self._clock = clock
        self.max_batch_size = max_batch_size or settings.max_batch_size

    # ------------------------------------------------------------------
    # Hooks for concrete services
    # ------------------------------------------------------------------

    @property
    def default_status(self) -> str:
        return self.statuses[0]

    def prepare_create(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Fill derived fields of a new record.  ``values`` is validated."""
        return values

    def prepare_update(self, record: ReadT, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Adjust the change set of an update (e.g. recompute totals)."""
        return changes

    def initial_stats(self) -> Dict[str, Any]:
        return {}

    def tally(self, stats: Dict[str, Any], record: ReadT) -> None:
        """Fold one record into the entity-specific statistics."""

    def finish_stats(self, stats: Dict[str, Any], total: int) -> Dict[str, Any]:
        return stats

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _now(self) -> datetime:
        return self._clock()

    def _field_aliases(self) -> Dict[str, str]:
        """Map both API (camelCase) and attribute names to attribute names."""
        aliases: Dict[str, str] = {}
        for name, info in self.read_schema.model_fields.items():
            aliases[name] = name
            if info.alias:
                aliases[info.alias] = name
        return aliases

    def _api_name(self, field: str) -> str:
        info = self.read_schema.model_fields[field]
        return info.alias or field

    def _resolve_field(self, field: Any, allowed: Sequence[str], what: str = "sort field") -> str:
        name = self._field_aliases().get(field) if isinstance(field, str) else None
        if name is None or name not in allowed:
            choices = ", ".join(self._api_name(f) for f in allowed)
            raise ValidationError(f"Invalid {what}: {field}. Must be one of: {choices}")
        return name

    def _check_unique(self, values: Mapping[str, Any], exclude_id: Optional[int] = None) -> None:
        for field in self.unique_fields:
            value = values.get(field)
            if value is None:
                continue
            for record in self.store.all():
                if record.id == exclude_id:
                    continue
                if str(getattr(record, field)).lower() == str(value).lower():
                    raise ValidationError(
                        f'{self.entity_name} with {field} "{value}" already exists'
                    )

    def _matches(self, record: ReadT, field: str, expected: Any) -> bool:
        actual = getattr(record, field)
        if field in self.casefold_filters and isinstance(actual, str):
            return actual.lower() == str(expected).lower()
        if isinstance(actual, int) and not isinstance(expected, int):
            expected = validate_id(expected)
        return actual == expected

    def _filter(self, records: Iterable[ReadT], filters: Optional[Mapping[str, Any]]) -> List[ReadT]:
        result = list(records)
        for key, expected in (filters or {}).items():
            if expected is None or expected == "":
                continue
            field = self._field_aliases().get(key)
            if field is None or field not in self.filter_fields:
                raise ValidationError(f"Unknown filter: {key}")
            result = [r for r in result if self._matches(r, field, expected)]
        return result

    def known_filters(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        """Keep the entries of ``params`` that name a filterable field."""
        aliases = self._field_aliases()
        return {
            key: value
            for key, value in params.items()
            if aliases.get(key) in self.filter_fields
        }

    def _check_batch(self, entries: Any, noun: str, verb: str) -> None:
        if not isinstance(entries, list) or not entries:
            raise ValidationError(f"{noun} must be a non-empty array")
        if len(entries) > self.max_batch_size:
            raise ValidationError(
                f"Cannot {verb} more than {self.max_batch_size} {self.plural_name} at once"
            )

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """Roll the store (and its audit entries) back if the block raises."""
        snapshot = self.store.snapshot()
        mark = self.audit.mark()
        try:
            yield
        except Exception:
            self.store.restore(snapshot)
            self.audit.discard_after(mark)
            logger.warning("Rolled back %s batch", self.object_type)
            raise

    def _insert(self, payload: BaseModel) -> ReadT:
        values = payload.model_dump()
        status = values.pop("status", None) or self.default_status
        values = self.prepare_create(values)
        self._check_unique(values)
        now = self._now()
        record = self.read_schema(
            id=self.store.allocate_id(),
            status=status,
            created_at=now,
            updated_at=now,
            **values,
        )
        self.store.add(record)
        return record

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def seed(self, payloads: Iterable[Mapping[str, Any]]) -> List[ReadT]:
        """Load sample records without writing audit entries."""
        return [self._insert(decode(self.create_schema, p)) for p in payloads]

    def get_all(self, filters: Optional[Mapping[str, Any]] = None) -> List[ReadT]:
        """Return a copy of all records, optionally filtered."""
        return self._filter(self.store.all(), filters)

    def get_by_id(self, record_id: Any) -> ReadT:
        parsed = validate_id(record_id)
        record = self.store.find(parsed)
        if record is None:
            raise NotFoundError.for_entity(self.entity_name, parsed)
        return record

    def create(self, data: Any) -> ReadT:
        """Validate ``data``, assign the next id and store the record."""
        record = self._insert(decode(self.create_schema, data))
        self.audit.log("create", self.object_type, record.id, {"status": record.status})
        logger.info("Created %s %s", self.object_type, record.id)
        return record

    def update(self, record_id: Any, data: Any) -> ReadT:
        """Apply the fields present in ``data`` to an existing record.

        Fields absent from ``data`` are left untouched; ``updatedAt`` is
        always refreshed.  Nothing is stored if validation fails.
        """
        record = self.get_by_id(record_id)
        payload = decode(self.update_schema, data)
        changes = {field: getattr(payload, field) for field in payload.model_fields_set}
        changes = self.prepare_update(record, changes)
        self._check_unique(changes, exclude_id=record.id)
        changes["updated_at"] = max(self._now(), record.created_at)
        updated = record.model_copy(update=changes)
        self.store.replace(updated)
        details = {k: v for k, v in changes.items() if k != "updated_at"}
        self.audit.log("update", self.object_type, updated.id, details)
        return updated

    def delete(self, record_id: Any) -> Dict[str, Any]:
        parsed = validate_id(record_id)
        if self.store.remove(parsed) is None:
            raise NotFoundError.for_entity(self.entity_name, parsed)
        self.audit.log("delete", self.object_type, parsed)
        logger.info("Deleted %s %s", self.object_type, parsed)
        return {"success": True, "deletedId": parsed}

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_stats(self) -> Dict[str, Any]:
        """Counts by status plus entity-specific totals, in one pass."""
        records = self.store.all()
        counts = {status: 0 for status in self.statuses}
        extra = self.initial_stats()
        for record in records:
            counts[record.status] = counts.get(record.status, 0) + 1
            self.tally(extra, record)
        return {"total": len(records), **counts, **self.finish_stats(extra, len(records))}

    def search(self, query: Any) -> List[ReadT]:
        """Case-insensitive substring search over the search fields."""
        if not isinstance(query, str) or not query:
            return []
        needle = query.lower()
        return [
            record
            for record in self.store.all()
            if any(
                needle in str(getattr(record, field) or "").lower()
                for field in self.search_fields
            )
        ]

    def get_sorted(
        self,
        sort_by: str = "id",
        order: str = "asc",
        filters: Optional[Mapping[str, Any]] = None,
    ) -> List[ReadT]:
        return self.get_sorted_by_multiple([{"field": sort_by, "order": order}], filters)

    def get_sorted_by_multiple(
        self,
        sort_fields: Any,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> List[ReadT]:
        """Sort by several fields; each is a name or ``{"field", "order"}``.

        Strings compare case-insensitively.  The sort is stable, so
        records that tie keep insertion order.
        """
        if not isinstance(sort_fields, list) or not sort_fields:
            raise ValidationError("Sort fields must be a non-empty array")
        keys: List[Tuple[str, bool]] = []
        for entry in sort_fields:
            if isinstance(entry, str):
                field, order = entry, "asc"
            elif isinstance(entry, Mapping) and entry.get("field"):
                field, order = entry["field"], entry.get("order") or "asc"
            else:
                raise ValidationError(
                    "Each sort field must be a string or object with 'field' and 'order' properties"
                )
            if not isinstance(order, str) or order.lower() not in SORT_ORDERS:
                raise ValidationError("Invalid sort order. Must be 'asc' or 'desc'")
            keys.append((self._resolve_field(field, self.sort_fields), order.lower() == "desc"))

        records = self.get_all(filters)
        for field, descending in reversed(keys):
            records.sort(key=lambda r, f=field: _sort_key(getattr(r, f)), reverse=descending)
        return records

    def get_paginated(
        self,
        page: Any = 1,
        limit: Any = None,
        filters: Optional[Mapping[str, Any]] = None,
        sort_by: Optional[str] = None,
        order: str = "asc",
    ) -> Dict[str, Any]:
        try:
            page_num = max(1, int(page or 1))
        except (TypeError, ValueError):
            page_num = 1
        try:
            limit_num = int(limit) if limit not in (None, "") else 0
        except (TypeError, ValueError):
            limit_num = 0
        if limit_num <= 0:
            limit_num = settings.default_page_size
        limit_num = max(1, min(self.max_batch_size, limit_num))

        if sort_by:
            records = self.get_sorted(sort_by, order, filters)
        else:
            records = self.get_all(filters)
        total = len(records)
        total_pages = math.ceil(total / limit_num)
        offset = (page_num - 1) * limit_num
        return {
            "items": records[offset:offset + limit_num],
            "pagination": {
                "page": page_num,
                "limit": limit_num,
                "total": total,
                "totalPages": total_pages,
                "hasNext": page_num < total_pages,
                "hasPrev": page_num > 1,
            },
        }

    def get_by_ids(self, ids: Any) -> Dict[str, Any]:
        """Batch lookup; ids that are missing or malformed go to ``notFound``."""
        if not isinstance(ids, list) or not ids:
            return {"items": [], "notFound": [], "foundCount": 0, "notFoundCount": 0}
        if len(ids) > self.max_batch_size:
            raise ValidationError(
                f"Cannot fetch more than {self.max_batch_size} {self.plural_name} at once"
            )
        found: List[ReadT] = []
        not_found: List[Any] = []
        for record_id in ids:
            try:
                found.append(self.get_by_id(record_id))
            except ServiceError:
                not_found.append(record_id)
        return {
            "items": found,
            "notFound": not_found,
            "foundCount": len(found),
            "notFoundCount": len(not_found),
        }

    def get_by_date_range(self, start: Any, end: Any, field: str = "created_at") -> List[ReadT]:
        if not start or not end:
            raise ValidationError("Both startDate and endDate are required")
        start_at = parse_datetime(start)
        end_at = parse_datetime(end)
        if start_at > end_at:
            raise ValidationError("Start date cannot be after end date")
        field = self._resolve_field(field, ("created_at", "updated_at"), what="date field")
        return [r for r in self.store.all() if start_at <= getattr(r, field) <= end_at]

    def get_by_created_range(self, start: Any, end: Any) -> List[ReadT]:
        return self.get_by_date_range(start, end, "created_at")

    def get_by_updated_range(self, start: Any, end: Any) -> List[ReadT]:
        return self.get_by_date_range(start, end, "updated_at")

    def get_recent(self, days: Any = 7, field: str = "created_at") -> List[ReadT]:
        if days is None or days == "":
            days = 7
        try:
            days_num = float(days)
        except (TypeError, ValueError):
            raise ValidationError("Days must be a number") from None
        if days_num < 0 or not math.isfinite(days_num):
            raise ValidationError("Days must be non-negative")
        field = self._resolve_field(field, ("created_at", "updated_at"), what="date field")
        try:
            cutoff = self._now() - timedelta(days=days_num)
        except OverflowError:
            cutoff = datetime.min.replace(tzinfo=timezone.utc)
        return [r for r in self.store.all() if getattr(r, field) >= cutoff]

    def get_recently_created(self, days: Any = 7) -> List[ReadT]:
        return self.get_recent(days, "created_at")

    def get_recently_updated(self, days: Any = 7) -> List[ReadT]:
        return self.get_recent(days, "updated_at")

    def get_by_pattern(self, pattern: Any) -> List[ReadT]:
        """Match the primary text field against ``*``/``?`` wildcards."""
        regex = _wildcard_regex(validate_pattern(pattern))
        return [
            r for r in self.store.all()
            if regex.search(str(getattr(r, self.pattern_field) or ""))
        ]

    def group_by(self, field: str) -> Dict[Any, List[ReadT]]:
        """Group records by a field; string keys are lower-cased."""
        name = self._resolve_field(field, self.sort_fields, what="group field")
        grouped: Dict[Any, List[ReadT]] = {}
        for record in self.store.all():
            key = getattr(record, name)
            if isinstance(key, str):
                key = key.lower()
            grouped.setdefault(key, []).append(record)
        return grouped

    # ------------------------------------------------------------------
    # Bulk and batch mutations
    # ------------------------------------------------------------------

    def bulk_create(self, payloads: Any, transactional: bool = False) -> Dict[str, Any]:
        """Create many records.

        By default each entry succeeds or fails on its own and the
        result partitions them.  With ``transactional=True`` the first
        failure rolls every creation back and raises.
        """
        self._check_batch(payloads, "Payloads", "create")
        created: List[ReadT] = []
        errors: List[Dict[str, Any]] = []

        if transactional:
            with self._transaction():
                for index, payload in enumerate(payloads):
                    try:
                        created.append(self.create(payload))
                    except ServiceError as exc:
                        raise ValidationError(
                            f"Transaction failed at index {index}: {exc.message}. "
                            "All changes rolled back."
                        ) from exc
        else:
            for index, payload in enumerate(payloads):
                try:
                    created.append(self.create(payload))
                except ServiceError as exc:
                    errors.append({"index": index, "data": payload, "error": exc.message})

        return {
            "created": created,
            "errors": errors,
            "successCount": len(created),
            "errorCount": len(errors),
            "transactional": transactional,
        }

    def _split_update(self, entry: Any) -> Tuple[Any, Dict[str, Any]]:
        if not isinstance(entry, Mapping):
            raise ValidationError("Each update must be an object")
        if entry.get("id") in (None, ""):
            raise ValidationError("Missing required field: id")
        changes = {k: v for k, v in entry.items() if k != "id"}
        return entry["id"], changes

    def bulk_update(self, updates: Any) -> Dict[str, Any]:
        """Update many records independently; each entry carries its ``id``."""
        self._check_batch(updates, "Updates", "update")
        updated: List[ReadT] = []
        errors: List[Dict[str, Any]] = []
        for index, entry in enumerate(updates):
            try:
                record_id, changes = self._split_update(entry)
                updated.append(self.update(record_id, changes))
            except ServiceError as exc:
                record_id = entry.get("id") if isinstance(entry, Mapping) else None
                errors.append({"index": index, "id": record_id, "error": exc.message})
        return {
            "updated": updated,
            "errors": errors,
            "successCount": len(updated),
            "errorCount": len(errors),
        }

    def bulk_update_validated(self, updates: Any) -> Dict[str, Any]:
        """Validate every update first; apply none of them if any fails."""
        self._check_batch(updates, "Updates", "update")
        errors: List[Dict[str, Any]] = []
        for index, entry in enumerate(updates):
            try:
                record_id, changes = self._split_update(entry)
                record = self.get_by_id(record_id)
                payload = decode(self.update_schema, changes)
                fields = {f: getattr(payload, f) for f in payload.model_fields_set}
                self._check_unique(fields, exclude_id=record.id)
            except ServiceError as exc:
                record_id = entry.get("id") if isinstance(entry, Mapping) else None
                errors.append({"index": index, "id": record_id, "error": exc.message})

        if errors:
            return {
                "updated": [],
                "errors": errors,
                "successCount": 0,
                "errorCount": len(errors),
                "validated": True,
            }

        # Entries can still conflict with each other (two renames to the
        # same name), so the apply phase is atomic too.
        updated: List[ReadT] = []
        with self._transaction():
            for entry in updates:
                record_id, changes = self._split_update(entry)
                updated.append(self.update(record_id, changes))
        return {
            "updated": updated,
            "errors": [],
            "successCount": len(updated),
            "errorCount": 0,
            "validated": True,
        }

    def bulk_delete(self, ids: Any) -> Dict[str, Any]:
        self._check_batch(ids, "Ids", "delete")
        deleted: List[int] = []
        errors: List[Dict[str, Any]] = []
        for index, record_id in enumerate(ids):
            try:
                deleted.append(self.delete(record_id)["deletedId"])
            except ServiceError as exc:
                errors.append({"index": index, "id": record_id, "error": exc.message})
        return {
            "deleted": deleted,
            "errors": errors,
            "successCount": len(deleted),
            "errorCount": len(errors),
        }

    def _apply_operation(self, operation: Any, results: Dict[str, List[Any]]) -> None:
        if not isinstance(operation, Mapping):
            raise ValidationError("Each operation must be an object")
        kind = operation.get("type")
        data = operation.get("data")
        if kind == "create":
            if not isinstance(data, Mapping):
                raise ValidationError("Create operation requires data")
            results["created"].append(self.create(data))
        elif kind == "update":
            if not isinstance(data, Mapping) or data.get("id") in (None, ""):
                raise ValidationError("Update operation requires 'id' in data")
            record_id, changes = self._split_update(data)
            results["updated"].append(self.update(record_id, changes))
        elif kind == "delete":
            if not isinstance(data, Mapping) or data.get("id") in (None, ""):
                raise ValidationError("Delete operation requires 'id' in data")
            results["deleted"].append(self.delete(data["id"])["deletedId"])
        else:
            raise ValidationError(f"Unknown operation type: {kind}")

    def batch(self, operations: Any) -> Dict[str, Any]:
        """Run create/update/delete operations atomically.

        Any failure rolls back every operation of the batch and raises
        a ``ValidationError`` naming the failing index.
        """
        self._check_batch(operations, "Operations", "process")
        results: Dict[str, List[Any]] = {"created": [], "updated": [], "deleted": []}
        with self._transaction():
            for index, operation in enumerate(operations):
                try:
                    self._apply_operation(operation, results)
                except ServiceError as exc:
                    raise ValidationError(
                        f"Batch operation failed at index {index}: {exc.message}. "
                        "All changes rolled back."
                    ) from exc
        return {
            **results,
            "errors": [],
            "successCount": sum(len(v) for v in results.values()),
            "errorCount": 0,
        }
