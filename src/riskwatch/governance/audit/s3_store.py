"""S3-backed audit store for immutable, versioned audit events."""

import asyncio
import hashlib
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

import boto3
from botocore.exceptions import ClientError

from riskwatch.common.constants import AuditConstants
from riskwatch.common.exceptions import AuditError
from riskwatch.governance.audit.schemas import AuditEvent
from riskwatch.governance.audit.store import AuditStore

logger = logging.getLogger(__name__)


class S3AuditStore(AuditStore):
    """Writes each audit event as its own object.

    Objects are partitioned by environment and day, and every object
    carries a content hash in its metadata. Keys are unique, so
    concurrent writers never overwrite each other.
    """

    DEFAULT_REGION = "us-east-1"
    DEFAULT_PREFIX = "audit-events/"
    DEFAULT_ENVIRONMENT = "production"

    def __init__(
        self,
        bucket_name: str,
        prefix: str = DEFAULT_PREFIX,
        environment: str = DEFAULT_ENVIRONMENT,
        region: Optional[str] = None,
        aws_profile: Optional[str] = None,
        enable_object_lock: bool = False,
        hash_algorithm: str = AuditConstants.HASH_ALGORITHM,
        s3_client=None,
    ):
        if not bucket_name:
            raise ValueError("S3 bucket name required")

        self.bucket_name = bucket_name
        self.prefix = prefix
        self.environment = environment
        self.region = region or self.DEFAULT_REGION
        self.enable_object_lock = enable_object_lock
        self.hash_algorithm = hash_algorithm

        if s3_client is not None:
            self.s3_client = s3_client
        elif aws_profile:
            session = boto3.Session(profile_name=aws_profile)
            self.s3_client = session.client("s3", region_name=self.region)
        else:
            self.s3_client = boto3.client("s3", region_name=self.region)

        logger.info(
            f"Initialized S3AuditStore: bucket={self.bucket_name}, "
            f"env={self.environment}, object_lock={self.enable_object_lock}"
        )

    def _partition_prefix(self, timestamp: datetime) -> str:
        return f"{self.prefix}{self.environment}/{timestamp.strftime('%Y-%m-%d')}/"

    def _object_key(self, event: AuditEvent) -> str:
        ts = event.timestamp.strftime("%Y%m%dT%H%M%S%f")
        return f"{self._partition_prefix(event.timestamp)}{ts}_{uuid.uuid4().hex[:8]}_{event.event_id}.json"

    def _compute_hash(self, body: str) -> str:
        hasher = hashlib.new(self.hash_algorithm)
        hasher.update(body.encode("utf-8"))
        return hasher.hexdigest()

    def _put(self, event: AuditEvent) -> AuditEvent:
        body = event.to_jsonl()
        entry_hash = self._compute_hash(body)
        key = self._object_key(event)

        put_kwargs = {
            "Bucket": self.bucket_name,
            "Key": key,
            "Body": body.encode("utf-8"),
            "ContentType": "application/json",
            "Metadata": {
                "event-id": event.event_id,
                "action": event.action.value,
                "organization-id": event.organization_id,
                "entry-hash": entry_hash,
            },
        }
        if self.enable_object_lock:
            put_kwargs["ObjectLockMode"] = "GOVERNANCE"
            put_kwargs["ObjectLockRetainUntilDate"] = datetime(
                event.timestamp.year + 7, 1, 1, tzinfo=timezone.utc
            )

        try:
            self.s3_client.put_object(**put_kwargs)
        except ClientError as e:
            logger.error(f"Failed to write audit event {event.event_id} to S3: {e}")
            raise AuditError(f"S3 write failed for {key}", details={"event_id": event.event_id}) from e

        logger.debug(f"Wrote audit event {event.event_id} to s3://{self.bucket_name}/{key}")
        return event.model_copy(update={"entry_hash": entry_hash})

    async def append_event(self, event: AuditEvent) -> AuditEvent:
        return await asyncio.to_thread(self._put, event)
