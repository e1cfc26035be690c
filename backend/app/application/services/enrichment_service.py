"""Enrichment workflow — attaches an AI-generated commercial insight to a record.

The request is addressed by record id from start to finish: the result is
written back through the store by id, never to whatever the operator
happens to be looking at when the provider answers.
"""

import dataclasses
import logging

import httpx

from app.application.interfaces import InsightGenerator
from app.application.services.record_store import RecordStore
from app.domain.entities import EnrichmentStatus
from app.domain.exceptions import (
    ChatProviderError,
    EnrichmentError,
    EnrichmentInProgressError,
    EntityNotFoundError,
)
from app.infrastructure.logging.colored_logger import WorkflowLogger, WorkflowStage

logger = logging.getLogger(__name__)
plog = WorkflowLogger("EnrichmentService")


class EnrichmentService:
    """Drives the asynchronous insight request for one record at a time per id.

    Analyses of different records may run concurrently; a second request
    for a record that is still being analyzed is rejected instead of
    issuing a duplicate provider call.
    """

    def __init__(self, store: RecordStore, generator: InsightGenerator | None = None):
        self._store = store
        self._generator = generator
        self._status: dict[str, EnrichmentStatus] = {}

    @property
    def enabled(self) -> bool:
        return self._generator is not None

    def status(self, record_id: str) -> EnrichmentStatus:
        return self._status.get(record_id, EnrichmentStatus.IDLE)

    def is_analyzing(self, record_id: str) -> bool:
        return self.status(record_id) is EnrichmentStatus.ANALYZING

    def analyzing_ids(self) -> list[str]:
        return [rid for rid, s in self._status.items() if s is EnrichmentStatus.ANALYZING]

    def forget(self, record_id: str) -> None:
        """Drop the state of a deleted record."""
        self._status.pop(record_id, None)

    async def analyze(self, record_id: str) -> str:
        """Generate and store a new insight for ``record_id``; returns the text.

        Raises:
            EntityNotFoundError: No record with that id.
            EnrichmentInProgressError: The record is already being analyzed.
            EnrichmentError: The provider failed or returned nothing usable;
                the stored insight is left exactly as it was.
            PersistenceError: The insight was applied in memory but not saved.
        """
        record = self._store.get(record_id)
        if record is None:
            raise EntityNotFoundError("ClientRecord", record_id)
        if self.is_analyzing(record_id):
            raise EnrichmentInProgressError(record_id)
        if self._generator is None:
            self._status[record_id] = EnrichmentStatus.FAILED
            raise EnrichmentError(record_id, "insight generation is not configured")

        self._status[record_id] = EnrichmentStatus.ANALYZING
        snapshot = dataclasses.replace(record)

        try:
            with plog.timed_step(
                WorkflowStage.ENRICHMENT,
                f"Requesting insight for '{snapshot.name}'",
                record_id=record_id,
                has_image=snapshot.has_image,
            ):
                text = await self._generator.generate_insight(snapshot)
        except (ChatProviderError, httpx.HTTPError, ValueError) as exc:
            self._status[record_id] = EnrichmentStatus.FAILED
            raise EnrichmentError(record_id, str(exc) or type(exc).__name__) from exc
        except BaseException:
            self._status[record_id] = EnrichmentStatus.FAILED
            raise

        text = (text or "").strip()
        if not text:
            self._status[record_id] = EnrichmentStatus.FAILED
            plog.step_error(WorkflowStage.ENRICHMENT, f"Empty insight for record {record_id}")
            raise EnrichmentError(record_id, "provider returned an empty insight")

        try:
            updated = await self._store.update_insight(record_id, text)
        finally:
            if record_id in self._store:
                self._status[record_id] = EnrichmentStatus.ENRICHED
            else:
                self._status.pop(record_id, None)

        if updated is None:
            logger.warning(
                "Record %s was deleted while its insight was being generated — result dropped",
                record_id,
            )
        else:
            plog.step_complete(
                WorkflowStage.COMPLETE, f"Insight stored for '{updated.name}'", chars=len(text)
            )
        return text
