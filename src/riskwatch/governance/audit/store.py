"""Audit Store - Abstraction for audit event persistence.

The core only appends; reading back is offered by the file and memory
stores for verification and tests, not as a contract the services rely
on.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator, List, Optional
import asyncio
import fcntl
import hashlib
import json
import logging
import os
import threading

from riskwatch.common.constants import AuditConstants
from riskwatch.common.exceptions import AuditError
from riskwatch.core.types import AuditAction
from riskwatch.governance.audit.schemas import AuditEvent

logger = logging.getLogger(__name__)


class AuditLogIntegrityError(Exception):
    """Raised when audit log integrity check fails."""
    pass


class AuditStore(ABC):
    """Abstract base class for audit storage backends.

    Implementations must be append-only. ``append_event`` may raise on
    any failure; containing that failure is the writer's job.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> AuditEvent:
        """Append an audit event to the store.

        Args:
            event: The audit event to append

        Returns:
            The event with integrity fields populated

        Raises:
            AuditError: If write fails
        """
        pass

    async def close(self) -> None:
        return None


class InMemoryAuditStore(AuditStore):
    """Keeps events in a list. Used in development and tests."""

    def __init__(self):
        self._events: List[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> AuditEvent:
        self._events.append(event)
        return event

    @property
    def events(self) -> List[AuditEvent]:
        return list(self._events)

    def events_for(self, resource_id: str) -> List[AuditEvent]:
        return [e for e in self._events if e.resource_id == resource_id]


class FileAuditStore(AuditStore):
    """File-based audit store with JSONL format and hash chain integrity.

    Features:
    - Append-only JSONL files with daily rotation
    - Hash chain for tamper detection
    - Atomic writes with file locking
    - Sidecar metadata for fast startup
    """

    METADATA_SUFFIX = ".meta"

    def __init__(
        self,
        log_dir: str = "./logs/audit",
        log_filename_pattern: str = "riskwatch_audit_{date}.jsonl",
        enable_hash_chain: bool = True,
        hash_algorithm: str = AuditConstants.HASH_ALGORITHM,
        fsync_on_write: bool = False,
    ):
        """Initialize file audit store.

        Args:
            log_dir: Directory for audit logs.
            log_filename_pattern: Pattern for log filename. {date} is replaced.
            enable_hash_chain: Whether to enable hash chain integrity.
            hash_algorithm: Hash algorithm for integrity checks.
            fsync_on_write: Whether to fsync after each write (slower but safer).
        """
        self.log_dir = Path(log_dir)
        self.log_filename_pattern = log_filename_pattern
        self.enable_hash_chain = enable_hash_chain
        self.hash_algorithm = hash_algorithm
        self.fsync_on_write = fsync_on_write

        # Writes run in a worker thread via asyncio.to_thread
        self._lock = threading.Lock()

        self._last_hash: Optional[str] = None

        self.log_dir.mkdir(parents=True, exist_ok=True)
        try:
            os.chmod(self.log_dir, 0o700)
        except OSError:
            logger.debug(f"Could not restrict permissions on {self.log_dir}")

        if self.enable_hash_chain:
            self._last_hash = self._load_last_hash()

    def _log_path(self, date: Optional[str] = None) -> Path:
        if date is None:
            date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        return self.log_dir / self.log_filename_pattern.replace("{date}", date)

    def _metadata_path(self) -> Path:
        log_path = self._log_path()
        return log_path.with_suffix(log_path.suffix + self.METADATA_SUFFIX)

    def _load_last_hash(self) -> Optional[str]:
        """Load last hash from metadata file or scan log."""
        meta_path = self._metadata_path()

        if meta_path.exists():
            try:
                with open(meta_path, "r") as f:
                    return json.load(f).get("last_hash")
            except (json.JSONDecodeError, IOError):
                logger.warning(f"Unreadable audit metadata {meta_path}, scanning log")

        return self._scan_log_for_last_hash()

    def _scan_log_for_last_hash(self) -> Optional[str]:
        log_path = self._log_path()

        if not log_path.exists():
            return None

        last_hash = None
        try:
            with open(log_path, "r") as f:
                for line in f:
                    line = line.strip()
                    if line:
                        last_hash = json.loads(line).get("entry_hash")
        except (json.JSONDecodeError, IOError):
            return None

        return last_hash

    def _save_metadata(self, last_hash: str) -> None:
        """Save metadata to sidecar file for fast startup."""
        meta = {
            "last_hash": last_hash,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            with open(self._metadata_path(), "w") as f:
                json.dump(meta, f)
        except IOError as e:
            logger.debug(f"Could not write audit metadata: {e}")

    def _compute_hash(self, content: str) -> str:
        hasher = hashlib.new(self.hash_algorithm)
        hasher.update(content.encode("utf-8"))
        return hasher.hexdigest()

    @staticmethod
    def _canonical(event_dict: dict) -> str:
        return json.dumps(event_dict, sort_keys=True, ensure_ascii=False, default=str)

    def _chain(self, event: AuditEvent) -> AuditEvent:
        """Add hash chain fields to the event."""
        if not self.enable_hash_chain:
            return event

        event_dict = event.model_dump(mode="json")
        event_dict["previous_hash"] = self._last_hash
        event_dict["entry_hash"] = None
        event_dict["entry_hash"] = self._compute_hash(self._canonical(event_dict))

        return AuditEvent.model_validate(event_dict)

    def _write(self, event: AuditEvent) -> AuditEvent:
        with self._lock:
            event = self._chain(event)

            fd = os.open(
                str(self._log_path()),
                os.O_WRONLY | os.O_CREAT | os.O_APPEND,
                0o600
            )
            try:
                fcntl.flock(fd, fcntl.LOCK_EX)
                try:
                    os.write(fd, (event.to_jsonl() + "\n").encode("utf-8"))
                    if self.fsync_on_write:
                        os.fsync(fd)
                finally:
                    fcntl.flock(fd, fcntl.LOCK_UN)
            finally:
                os.close(fd)

            if self.enable_hash_chain and event.entry_hash:
                self._last_hash = event.entry_hash
                self._save_metadata(event.entry_hash)

            return event

    async def append_event(self, event: AuditEvent) -> AuditEvent:
        """Append event to today's log file.

        Raises:
            AuditError: If the log file cannot be written
        """
        try:
            return await asyncio.to_thread(self._write, event)
        except OSError as e:
            raise AuditError(
                f"Audit log write failed: {e}",
                details={"event_id": event.event_id, "log_dir": str(self.log_dir)},
            ) from e

    def get_events(
        self,
        date: Optional[str] = None,
        action: Optional[AuditAction] = None,
        resource_id: Optional[str] = None,
    ) -> Generator[AuditEvent, None, None]:
        """Read events back with optional filtering."""
        log_path = self._log_path(date)

        if not log_path.exists():
            return

        with open(log_path, "r") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue

                try:
                    event = AuditEvent.from_jsonl(line)
                except (json.JSONDecodeError, ValueError) as e:
                    logger.warning(f"Skipped malformed audit event: {e}")
                    continue

                if action and event.action != action:
                    continue
                if resource_id and event.resource_id != resource_id:
                    continue

                yield event

    def verify_integrity(self, date: Optional[str] = None) -> bool:
        """Verify hash chain integrity of a log file.

        Raises:
            AuditLogIntegrityError: If the chain is broken or an event was altered
        """
        if not self.enable_hash_chain:
            return True

        log_path = self._log_path(date)

        if not log_path.exists():
            return True

        previous_hash = None
        line_number = 0

        with open(log_path, "r") as f:
            for line in f:
                line_number += 1
                line = line.strip()
                if not line:
                    continue

                try:
                    event_dict = json.loads(line)
                except json.JSONDecodeError as e:
                    raise AuditLogIntegrityError(
                        f"Malformed JSON at line {line_number}: {e}"
                    )

                if event_dict.get("previous_hash") != previous_hash:
                    raise AuditLogIntegrityError(
                        f"Hash chain broken at line {line_number}. "
                        f"Expected previous_hash={previous_hash}, "
                        f"got {event_dict.get('previous_hash')}"
                    )

                stored_hash = event_dict.get("entry_hash")
                event_dict["entry_hash"] = None
                if self._compute_hash(self._canonical(event_dict)) != stored_hash:
                    raise AuditLogIntegrityError(
                        f"Entry hash mismatch at line {line_number}. "
                        f"Event may have been tampered with."
                    )

                previous_hash = stored_hash

        return True

    def get_last_hash(self) -> Optional[str]:
        return self._last_hash
