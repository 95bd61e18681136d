"""Record store - async CRUD boundary for risks and assets.

The store assigns ids and ``created_at``; reads come back newest first.
Concurrent edits to one record are not detected: the last write wins.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ValidationError as PydanticValidationError

from riskwatch.common.exceptions import RecordNotFoundError, StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class RecordStore(ABC, Generic[T]):
    """Abstract record store for one entity kind."""

    resource_type: str

    @abstractmethod
    async def create(self, data: Dict[str, Any]) -> T:
        """Insert a record; the store assigns ``id`` and ``created_at``.

        Raises:
            StoreError: If the write is rejected
        """
        pass

    @abstractmethod
    async def get(self, record_id: str) -> T:
        """Raises RecordNotFoundError when the id is unknown."""
        pass

    @abstractmethod
    async def update(self, record_id: str, changes: Dict[str, Any]) -> T:
        pass

    @abstractmethod
    async def delete(self, record_id: str) -> None:
        pass

    @abstractmethod
    async def list(self) -> List[T]:
        """All records ordered by ``created_at`` descending."""
        pass


class InMemoryRecordStore(RecordStore[T]):
    """Dictionary-backed store.

    Records are copied on the way in and out so callers never share
    state with the store. ``fail_next`` makes the next call of an
    operation raise, which is how tests simulate an unavailable backend.
    """

    def __init__(self, model: Type[T], resource_type: str, latency: float = 0.0):
        self.model = model
        self.resource_type = resource_type
        self.latency = latency
        self._records: Dict[str, T] = {}
        self._failures: Dict[str, Exception] = {}

    def fail_next(self, operation: str, error: Optional[Exception] = None) -> None:
        self._failures[operation] = error or StoreError(
            f"{self.resource_type} store unavailable",
            operation=operation,
            resource_type=self.resource_type,
        )

    async def _enter(self, operation: str) -> None:
        if self.latency:
            await asyncio.sleep(self.latency)
        error = self._failures.pop(operation, None)
        if error is not None:
            raise error

    def _require(self, record_id: str, operation: str) -> T:
        record = self._records.get(record_id)
        if record is None:
            raise RecordNotFoundError(self.resource_type, record_id, operation=operation)
        return record

    def _build(self, data: Dict[str, Any], operation: str, record_id: Optional[str]) -> T:
        try:
            return self.model.model_validate(data)
        except PydanticValidationError as e:
            raise StoreError(
                f"{self.resource_type} rejected by store: {e.error_count()} invalid fields",
                operation=operation,
                resource_type=self.resource_type,
                resource_id=record_id,
            ) from e

    async def create(self, data: Dict[str, Any]) -> T:
        await self._enter("create")
        record_id = data.get("id") or uuid4().hex
        record = self._build(
            {**data, "id": record_id, "created_at": datetime.now(timezone.utc)},
            "create",
            record_id,
        )
        self._records[record_id] = record
        logger.debug(f"Created {self.resource_type} {record_id}")
        return record.model_copy(deep=True)

    async def get(self, record_id: str) -> T:
        await self._enter("get")
        return self._require(record_id, "read").model_copy(deep=True)

    async def update(self, record_id: str, changes: Dict[str, Any]) -> T:
        await self._enter("update")
        current = self._require(record_id, "update")
        merged = {**current.model_dump(), **changes, "id": record_id, "created_at": current.created_at}
        record = self._build(merged, "update", record_id)
        self._records[record_id] = record
        logger.debug(f"Updated {self.resource_type} {record_id}: {sorted(changes)}")
        return record.model_copy(deep=True)

    async def delete(self, record_id: str) -> None:
        await self._enter("delete")
        self._require(record_id, "delete")
        del self._records[record_id]
        logger.debug(f"Deleted {self.resource_type} {record_id}")

    async def list(self) -> List[T]:
        await self._enter("list")
        ordered = sorted(
            self._records.values(),
            key=lambda r: r.created_at or datetime.min.replace(tzinfo=timezone.utc),
            reverse=True,
        )
        return [r.model_copy(deep=True) for r in ordered]

    def __len__(self) -> int:
        return len(self._records)
