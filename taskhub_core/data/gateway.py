# =============================================================================
# taskhub_core/data/gateway.py
# Remote Collection Gateway: generic CRUD over Supabase tables
# =============================================================================
"""
CollectionGateway is the single path through which rows are written to and
read from Supabase.

Every write is stamped with ``user_id`` and with ``created_at``/``updated_at``
from the process-wide monotonic clock. Read paths (``list``/``get``) degrade
to empty results on failure; write paths raise StorageError.

Usage:
    gateway = CollectionGateway(client, session_manager)
    task_id = await gateway.create("tasks", {"title": "Beli susu"})
    rows = await gateway.list("tasks")
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from taskhub_core.config import Settings, get_settings
from taskhub_core.errors import StorageError, entity_label, get_message
from taskhub_core.logging import get_logger
from .timestamps import isoformat, to_instant, utc_now

if TYPE_CHECKING:
    from datetime import datetime
    from taskhub_core.auth import SessionManager

logger = get_logger(__name__)

ID_FIELD = "id"
OWNER_FIELD = "user_id"
CREATED_FIELD = "created_at"
UPDATED_FIELD = "updated_at"
TIMESTAMP_FIELDS = (CREATED_FIELD, UPDATED_FIELD)

# Columns the gateway owns; callers cannot set them
RESERVED_FIELDS = frozenset({ID_FIELD, OWNER_FIELD, CREATED_FIELD, UPDATED_FIELD})

# PostgREST insufficient_privilege (RLS rejection) and HTTP auth failures
PERMISSION_DENIED_CODES = frozenset({"42501", "401", "403"})


class WriteStatus(Enum):
    """Outcome of a single insert attempt."""
    ACCEPTED = "accepted"
    PERMISSION_DENIED = "permission_denied"


@dataclass(frozen=True)
class WriteOutcome:
    """Typed result of an insert: the stored row, or a permission denial."""
    status: WriteStatus
    record: Optional[Dict[str, Any]] = None
    error: Optional[Exception] = None

    @classmethod
    def accepted(cls, record: Dict[str, Any]) -> WriteOutcome:
        return cls(status=WriteStatus.ACCEPTED, record=record)

    @classmethod
    def denied(cls, error: Exception) -> WriteOutcome:
        return cls(status=WriteStatus.PERMISSION_DENIED, error=error)

    @property
    def retry_as_anonymous(self) -> bool:
        return self.status is WriteStatus.PERMISSION_DENIED


def is_permission_denied(error: Exception) -> bool:
    """True for errors Supabase raises when a row-level policy rejects a write."""
    code = getattr(error, "code", None)
    return code is not None and str(code) in PERMISSION_DENIED_CODES


def _describe(error: Exception) -> str:
    return getattr(error, "message", None) or str(error) or error.__class__.__name__


def _writable(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in fields.items() if k not in RESERVED_FIELDS}


class CollectionGateway:
    """Collection-agnostic CRUD with identity stamping."""

    def __init__(
        self,
        client,
        session: SessionManager,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._client = client
        self._session = session
        self._settings = settings or get_settings()
        self._clock = clock

    @property
    def anonymous_user_id(self) -> str:
        return self._settings.anonymous_user_id

    def _error(self, key: str, collection: str, **kwargs) -> str:
        locale = self._settings.locale
        return get_message(key, locale, entity=entity_label(collection, locale), **kwargs)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, collection: str, fields: Dict[str, Any]) -> str:
        """
        Insert a row and return its generated id.

        A permission-denied rejection is retried once with ``user_id`` set to
        the anonymous marker.

        Raises:
            StorageError: insert failed (including a denied retry)
        """
        identity = await self._session.ensure_session()
        now = isoformat(self._clock())
        payload = {
            **_writable(fields),
            OWNER_FIELD: identity.uid if identity is not None else self.anonymous_user_id,
            CREATED_FIELD: now,
            UPDATED_FIELD: now,
        }

        try:
            outcome = await self._insert(collection, payload)
            if outcome.retry_as_anonymous:
                logger.warning(
                    f"Permission denied creating row in {collection}, retrying as anonymous"
                )
                outcome = await self._insert(
                    collection, {**payload, OWNER_FIELD: self.anonymous_user_id}
                )
                if outcome.retry_as_anonymous:
                    raise outcome.error
        except StorageError:
            raise
        except Exception as e:
            logger.error(f"Error creating row in {collection}: {_describe(e)}")
            raise StorageError(
                self._error("storage.create", collection, error=_describe(e)),
                collection=collection,
                operation="create",
            ) from e

        record_id = (outcome.record or {}).get(ID_FIELD)
        if record_id is None:
            raise StorageError(
                self._error("storage.create", collection, error="no id returned"),
                collection=collection,
                operation="create",
            )

        logger.info(f"Created {collection} row {record_id}")
        return str(record_id)

    async def _insert(self, collection: str, payload: Dict[str, Any]) -> WriteOutcome:
        try:
            response = await self._client.table(collection).insert(payload).execute()
        except Exception as e:
            if is_permission_denied(e):
                return WriteOutcome.denied(e)
            raise
        rows = response.data or []
        return WriteOutcome.accepted(rows[0] if rows else {})

    async def update(
        self,
        collection: str,
        record_id: str,
        fields: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Merge ``fields`` into an existing row and refresh ``updated_at``.

        Columns not in ``fields`` are left untouched; id, owner and
        ``created_at`` are never rewritten.

        Returns:
            The updated row, timestamps normalized

        Raises:
            StorageError: the row does not exist or the update failed
        """
        await self._session.ensure_session()
        changes = {**_writable(fields), UPDATED_FIELD: isoformat(self._clock())}

        try:
            response = await (
                self._client.table(collection)
                .update(changes)
                .eq(ID_FIELD, record_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error updating {collection} row {record_id}: {_describe(e)}")
            raise StorageError(
                self._error("storage.update", collection, error=_describe(e)),
                collection=collection,
                operation="update",
                record_id=record_id,
            ) from e

        rows = response.data or []
        if not rows:
            raise StorageError(
                self._error("storage.not_found", collection, record_id=record_id),
                collection=collection,
                operation="update",
                record_id=record_id,
            )

        logger.info(f"Updated {collection} row {record_id}")
        return self._normalize(rows[0])

    async def delete(self, collection: str, record_id: str) -> None:
        """
        Remove a row.

        Raises:
            StorageError: the row does not exist or the delete failed
        """
        await self._session.ensure_session()

        try:
            response = await (
                self._client.table(collection)
                .delete()
                .eq(ID_FIELD, record_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error deleting {collection} row {record_id}: {_describe(e)}")
            raise StorageError(
                self._error("storage.delete", collection, error=_describe(e)),
                collection=collection,
                operation="delete",
                record_id=record_id,
            ) from e

        if not response.data:
            raise StorageError(
                self._error("storage.not_found", collection, record_id=record_id),
                collection=collection,
                operation="delete",
                record_id=record_id,
            )

        logger.info(f"Deleted {collection} row {record_id}")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list(self, collection: str, strict: bool = False) -> List[Dict[str, Any]]:
        """
        Fetch the whole collection, newest first.

        Args:
            collection: Table name
            strict: Raise StorageError on failure instead of returning []

        Returns:
            Rows ordered by ``created_at`` descending
        """
        await self._session.ensure_session()

        try:
            response = await (
                self._client.table(collection)
                .select("*")
                .order(CREATED_FIELD, desc=True)
                .execute()
            )
        except Exception as e:
            message = self._error("storage.list", collection, error=_describe(e))
            if strict:
                raise StorageError(message, collection=collection, operation="list") from e
            logger.error(message)
            return []

        records = [self._normalize(row) for row in response.data or []]
        records.sort(key=lambda r: r[CREATED_FIELD], reverse=True)
        logger.debug(f"Retrieved {len(records)} rows from {collection}")
        return records

    async def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        """Fetch one row by id; None when missing or unreadable."""
        await self._session.ensure_session()

        try:
            response = await (
                self._client.table(collection)
                .select("*")
                .eq(ID_FIELD, record_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(self._error("storage.list", collection, error=_describe(e)))
            return None

        rows = response.data or []
        return self._normalize(rows[0]) if rows else None

    @staticmethod
    def _normalize(row: Dict[str, Any]) -> Dict[str, Any]:
        record = dict(row)
        for name in TIMESTAMP_FIELDS:
            record[name] = to_instant(record.get(name))
        return record
