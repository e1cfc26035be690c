"""Record store — the single source of truth for the client collection.

Holds the records in memory (insertion order) and writes the whole
collection to a durable key/value slot after every mutation.
"""

import asyncio
import logging
from collections.abc import Iterator

from pydantic import TypeAdapter, ValidationError

from app.application.interfaces import KeyValueStorage
from app.application.schemas.client_record import StoredClientRecord
from app.domain.entities import ClientRecord
from app.domain.exceptions import PersistenceError
from app.infrastructure.logging.colored_logger import WorkflowLogger, WorkflowStage

logger = logging.getLogger(__name__)
plog = WorkflowLogger("RecordStore")

_COLLECTION_ADAPTER = TypeAdapter(list[StoredClientRecord])


class RecordStore:
    """Owns the canonical list of records and its persistence.

    Callers never mutate the collection directly: every mutating method
    applies the change in memory and then persists the full snapshot. A
    failed write raises PersistenceError but the in-memory change stays.
    """

    def __init__(self, storage: KeyValueStorage, storage_key: str):
        self._storage = storage
        self._key = storage_key
        self._records: list[ClientRecord] = []
        self._write_lock = asyncio.Lock()

    # ── Read access ─────────────────────────────────────────────────

    @property
    def storage_key(self) -> str:
        return self._key

    @property
    def records(self) -> tuple[ClientRecord, ...]:
        """Immutable snapshot in storage (insertion) order."""
        return tuple(self._records)

    def get(self, record_id: str) -> ClientRecord | None:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return any(r.id == record_id for r in self._records)

    def __iter__(self) -> Iterator[ClientRecord]:
        return iter(tuple(self._records))

    # ── Persistence ─────────────────────────────────────────────────

    async def load_all(self) -> list[ClientRecord]:
        """Restore the collection from durable storage.

        An absent or unparseable payload yields an empty collection.
        """
        payload = await self._storage.get(self._key)
        if not payload:
            logger.info("No stored records under '%s' — starting empty", self._key)
            self._records = []
            return []

        try:
            stored = _COLLECTION_ADAPTER.validate_json(payload)
        except ValidationError as exc:
            logger.warning(
                "Stored payload under '%s' is unreadable — starting empty (%d errors)",
                self._key,
                exc.error_count(),
            )
            self._records = []
            return []

        records = self._dedupe([self._to_entity(s) for s in stored])
        self._records = records
        plog.step_complete(WorkflowStage.STORAGE, "Client records loaded", count=len(records), key=self._key)
        return list(records)

    async def persist(self) -> None:
        """Write the full current collection, replacing the prior snapshot.

        Writes are serialized and the snapshot is taken once the lock is
        held, so the last write to complete always carries the latest state.
        """
        async with self._write_lock:
            count = len(self._records)
            payload = _COLLECTION_ADAPTER.dump_json(
                [self._to_stored(r) for r in self._records],
                by_alias=True,
                exclude_none=True,
            ).decode("utf-8")
            try:
                await self._storage.set(self._key, payload)
            except PersistenceError:
                logger.exception(
                    "Persisting %d records to '%s' failed — in-memory state kept",
                    count,
                    self._key,
                )
                raise
        logger.debug("Persisted %d records to '%s'", count, self._key)

    # ── Mutations ───────────────────────────────────────────────────

    async def append(self, record: ClientRecord) -> ClientRecord:
        self._records.append(record)
        logger.info("Record %s added (%s)", record.id, record.name)
        await self.persist()
        return record

    async def replace(self, record_id: str, record: ClientRecord) -> bool:
        """Overwrite the record with ``record_id``. Returns False (no-op) when absent."""
        for index, existing in enumerate(self._records):
            if existing.id == record_id:
                self._records[index] = record
                logger.info("Record %s updated", record_id)
                await self.persist()
                return True
        logger.warning("Replace ignored — record %s not in store", record_id)
        return False

    async def remove(self, record_id: str) -> bool:
        """Delete the record with ``record_id``. Returns False (no-op) when absent."""
        remaining = [r for r in self._records if r.id != record_id]
        if len(remaining) == len(self._records):
            return False
        self._records = remaining
        logger.info("Record %s deleted", record_id)
        await self.persist()
        return True

    async def update_insight(self, record_id: str, text: str) -> ClientRecord | None:
        """Set ``ai_insight`` on the matching record only; None when the record is gone."""
        record = self.get(record_id)
        if record is None:
            return None
        record.ai_insight = text
        logger.info("Insight stored for record %s (%d chars)", record_id, len(text))
        await self.persist()
        return record

    # ── Mapping ─────────────────────────────────────────────────────

    @staticmethod
    def _to_entity(stored: StoredClientRecord) -> ClientRecord:
        """Map storage DTO → domain entity."""
        return ClientRecord(
            id=stored.id,
            name=stored.name,
            phone=stored.phone,
            email=stored.email,
            address=stored.address,
            whatsapp_handle=stored.whatsapp_handle,
            budget_label=stored.budget_label,
            technical_notes=stored.technical_notes,
            image_data=stored.image_data,
            created_at=stored.created_at,
            ai_insight=stored.ai_insight,
        )

    @staticmethod
    def _to_stored(record: ClientRecord) -> StoredClientRecord:
        """Map domain entity → storage DTO."""
        return StoredClientRecord(
            id=record.id,
            name=record.name,
            phone=record.phone,
            email=record.email,
            address=record.address,
            whatsapp_handle=record.whatsapp_handle,
            budget_label=record.budget_label,
            technical_notes=record.technical_notes,
            image_data=record.image_data,
            created_at=record.created_at,
            ai_insight=record.ai_insight,
        )

    def _dedupe(self, records: list[ClientRecord]) -> list[ClientRecord]:
        """Keep the first record for each id; the live collection never holds duplicates."""
        seen: set[str] = set()
        unique: list[ClientRecord] = []
        for record in records:
            if record.id in seen:
                logger.warning("Dropping duplicate stored record id %s", record.id)
                continue
            seen.add(record.id)
            unique.append(record)
        return unique
