"""Record storage."""

from riskwatch.storage.store import InMemoryRecordStore, RecordStore

__all__ = ["InMemoryRecordStore", "RecordStore"]
