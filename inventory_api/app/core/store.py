"""
In-memory record store.

An ``EntityStore`` is the "database" of one entity: an ordered list of
records plus the counter used to hand out identifiers.  Identifiers
start at 1, increase by one per allocation and are never reused, even
after the record holding them is deleted.  The store is created by
the application factory and handed to exactly one service; nothing
else mutates it.
"""

from dataclasses import dataclass
from typing import Generic, Iterable, List, Optional, Tuple, TypeVar

RecordT = TypeVar("RecordT")


@dataclass(frozen=True)
class StoreSnapshot(Generic[RecordT]):
    """Point-in-time copy used to roll back a failed batch."""

    records: Tuple[RecordT, ...]
    next_id: int


class EntityStore(Generic[RecordT]):
    """Ordered collection of records keyed by their integer ``id``."""

    def __init__(self, records: Optional[Iterable[RecordT]] = None) -> None:
        self._records: List[RecordT] = list(records or [])
        self._next_id = max((r.id for r in self._records), default=0) + 1

    def __len__(self) -> int:
        return len(self._records)

    @property
    def next_id(self) -> int:
        return self._next_id

    def all(self) -> List[RecordT]:
        """Return a shallow copy of the records in insertion order."""
        return list(self._records)

    def find(self, record_id: int) -> Optional[RecordT]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def allocate_id(self) -> int:
        record_id = self._next_id
        self._next_id += 1
        return record_id

    def add(self, record: RecordT) -> None:
        self._records.append(record)

    def replace(self, record: RecordT) -> None:
        """Swap the stored record that has the same ``id`` as ``record``."""
        for index, existing in enumerate(self._records):
            if existing.id == record.id:
                self._records[index] = record
                return
        raise KeyError(record.id)

    def remove(self, record_id: int) -> Optional[RecordT]:
        for index, existing in enumerate(self._records):
            if existing.id == record_id:
                return self._records.pop(index)
        return None

    def snapshot(self) -> StoreSnapshot[RecordT]:
        return StoreSnapshot(records=tuple(self._records), next_id=self._next_id)

    def restore(self, snapshot: StoreSnapshot[RecordT]) -> None:
        self._records = list(snapshot.records)
        self._next_id = snapshot.next_id
