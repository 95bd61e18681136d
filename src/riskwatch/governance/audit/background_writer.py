"""Background Audit Writer - decoupled, retrying sink for audit events."""

import asyncio
import logging
from typing import Optional

from tenacity import AsyncRetrying, RetryError, stop_after_attempt, wait_exponential

from riskwatch.common.constants import AuditConstants
from riskwatch.governance.audit.schemas import AuditEvent
from riskwatch.governance.audit.store import AuditStore

logger = logging.getLogger(__name__)


class BackgroundAuditWriter:
    """Bounded queue plus a drain task that writes events to a store.

    ``submit`` never blocks and never raises: a full queue or a stopped
    writer drops the event and counts it. The drain task retries each
    write with exponential backoff and drops the event once the attempts
    are exhausted.
    """

    DEFAULT_QUEUE_SIZE = AuditConstants.QUEUE_SIZE
    DEFAULT_FLUSH_TIMEOUT = AuditConstants.FLUSH_TIMEOUT_SECONDS

    def __init__(
        self,
        store: AuditStore,
        max_queue_size: int = DEFAULT_QUEUE_SIZE,
        flush_timeout: float = DEFAULT_FLUSH_TIMEOUT,
        retry_attempts: int = AuditConstants.RETRY_ATTEMPTS,
        retry_min_wait: float = AuditConstants.RETRY_MIN_WAIT_SECONDS,
        retry_max_wait: float = AuditConstants.RETRY_MAX_WAIT_SECONDS,
    ):
        """Initialize background audit writer.

        Args:
            store: Audit store backend.
            max_queue_size: Maximum number of events to buffer.
            flush_timeout: Timeout for draining the queue on shutdown.
            retry_attempts: Write attempts per event before it is dropped.
            retry_min_wait: Lower bound of the backoff between attempts.
            retry_max_wait: Upper bound of the backoff between attempts.
        """
        self.store = store
        self.max_queue_size = max_queue_size
        self.flush_timeout = flush_timeout
        self.retry_attempts = retry_attempts
        self.retry_min_wait = retry_min_wait
        self.retry_max_wait = retry_max_wait

        self._queue: Optional[asyncio.Queue] = None
        self._task: Optional[asyncio.Task] = None
        self._stopped = False

        # Statistics
        self._events_written = 0
        self._events_dropped = 0
        self._write_failures = 0

    def start(self) -> None:
        """Start the drain task on the running loop. Idempotent."""
        if self._task is not None and not self._task.done():
            return
        if self._queue is None:
            self._queue = asyncio.Queue(maxsize=self.max_queue_size)
        self._stopped = False
        self._task = asyncio.get_running_loop().create_task(
            self._drain_loop(), name="AuditWriter"
        )
        logger.info("Background audit writer started")

    def submit(self, event: AuditEvent) -> bool:
        """Queue an event for writing.

        Returns:
            True if the event was queued, False if it was dropped.
        """
        if self._stopped:
            self._events_dropped += 1
            logger.error(f"Audit writer stopped, event {event.event_id} dropped")
            return False

        if self._task is None:
            self.start()

        try:
            self._queue.put_nowait(event)
            return True
        except asyncio.QueueFull:
            self._events_dropped += 1
            logger.error(f"Audit queue full, event {event.event_id} dropped")
            return False

    async def _write_with_retry(self, event: AuditEvent) -> None:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=self.retry_min_wait, max=self.retry_max_wait),
            reraise=False,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    await self.store.append_event(event)
        except RetryError as e:
            self._events_dropped += 1
            self._write_failures += 1
            cause = e.last_attempt.exception()
            logger.error(
                f"Failed to write audit event {event.event_id} "
                f"({event.action.value}) after {self.retry_attempts} attempts: {cause}"
            )
            return

        self._events_written += 1

    async def _drain_loop(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self._write_with_retry(event)
            finally:
                self._queue.task_done()

    async def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait until every queued event has been written or dropped.

        Returns:
            True if the queue drained, False if the timeout expired.
        """
        if self._queue is None:
            return True
        try:
            await asyncio.wait_for(self._queue.join(), timeout=timeout)
            return True
        except asyncio.TimeoutError:
            return False

    async def shutdown(self, timeout: Optional[float] = None) -> None:
        """Drain pending events, then stop the drain task.

        Args:
            timeout: Maximum time to wait for queue drain. Uses default if None.
        """
        if self._stopped:
            return

        timeout = timeout if timeout is not None else self.flush_timeout
        logger.info("Shutting down background audit writer...")

        drained = await self.flush(timeout)
        if not drained:
            logger.warning(
                f"Audit writer did not drain within {timeout}s, "
                f"{self.queue_size} events abandoned"
            )
            self._events_dropped += self.queue_size

        self._stopped = True
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        await self.store.close()

        logger.info(
            f"Audit writer shutdown complete. "
            f"Written: {self._events_written}, "
            f"Dropped: {self._events_dropped}"
        )

    def get_stats(self) -> dict:
        """Get writer statistics."""
        return {
            "events_written": self._events_written,
            "events_dropped": self._events_dropped,
            "write_failures": self._write_failures,
            "queue_size": self.queue_size,
            "max_queue_size": self.max_queue_size,
        }

    @property
    def queue_size(self) -> int:
        """Current number of events in the queue."""
        return self._queue.qsize() if self._queue is not None else 0

    @property
    def is_running(self) -> bool:
        """Whether the drain task is running."""
        return self._task is not None and not self._task.done()
