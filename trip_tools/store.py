from typing import Any, Callable, Dict, List, Optional, Protocol
import asyncio
import uuid
from collections import defaultdict
from datetime import datetime, timezone

from .errors import PersistenceConflict
from .models import TripRecord, TripStatus


class TripStore(Protocol):
    async def insert(self, record: TripRecord) -> TripRecord: ...

    async def list(self, user_id: str, status: Optional[TripStatus] = None) -> List[TripRecord]: ...

    async def get(self, user_id: str, trip_id: str) -> TripRecord: ...

    async def update(self, user_id: str, trip_id: str, changes: Dict[str, Any]) -> TripRecord: ...

    async def delete(self, user_id: str, trip_id: str) -> None: ...

    def user_lock(self, user_id: str) -> asyncio.Lock: ...


class InMemoryTripStore:
    """Process-local trip table.

    Writes to one record are serialized by that record's lock; the last writer
    wins. ``user_lock`` lets callers make check-then-insert sequences atomic
    for one user.
    """

    def __init__(self, id_factory: Callable[[], str] | None = None) -> None:
        self._rows: Dict[str, TripRecord] = {}
        self._record_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._user_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))

    def user_lock(self, user_id: str) -> asyncio.Lock:
        return self._user_locks[user_id]

    async def insert(self, record: TripRecord) -> TripRecord:
        stored = record.model_copy(update={"id": record.id or self._id_factory()})
        async with self._record_locks[stored.id]:
            self._rows[stored.id] = stored
        return stored

    async def list(self, user_id: str, status: Optional[TripStatus] = None) -> List[TripRecord]:
        rows = [r for r in self._rows.values() if r.user_id == user_id]
        if status is not None:
            rows = [r for r in rows if r.status == status]
        rows.sort(key=lambda r: r.created_at, reverse=True)
        return rows

    async def get(self, user_id: str, trip_id: str) -> TripRecord:
        row = self._rows.get(trip_id)
        if row is None or row.user_id != user_id:
            raise PersistenceConflict("Trip not found or you don't have access to it")
        return row

    async def update(self, user_id: str, trip_id: str, changes: Dict[str, Any]) -> TripRecord:
        async with self._record_locks[trip_id]:
            current = await self.get(user_id, trip_id)
            changes = {**changes, "updated_at": datetime.now(timezone.utc).isoformat()}
            updated = current.model_copy(update=changes)
            self._rows[trip_id] = updated
            return updated

    async def delete(self, user_id: str, trip_id: str) -> None:
        async with self._record_locks[trip_id]:
            await self.get(user_id, trip_id)
            del self._rows[trip_id]
        self._record_locks.pop(trip_id, None)
