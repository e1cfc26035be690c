"""Application service (use case) for stateless ClientRecord operations."""

import logging

from app.application.schemas.client_record import ClientRecordCreate, ClientRecordUpdate
from app.application.services.enrichment_service import EnrichmentService
from app.application.services.record_editor import RecordEditor
from app.application.services.record_query import view
from app.application.services.record_store import RecordStore
from app.domain.entities import ClientRecord, EnrichmentStatus
from app.domain.exceptions import EntityNotFoundError, ImageCaptureError

logger = logging.getLogger(__name__)


class ClientRecordService:
    """Orchestrates client record CRUD for the REST surface.

    Every create/update goes through a fresh RecordEditor so validation and
    merge rules are the same as in the operator workspace.
    """

    def __init__(self, store: RecordStore, enrichment: EnrichmentService):
        self._store = store
        self._enrichment = enrichment

    def get_record(self, record_id: str) -> ClientRecord:
        record = self._store.get(record_id)
        if record is None:
            raise EntityNotFoundError("ClientRecord", record_id)
        return record

    def list_records(self, query: str = "") -> list[ClientRecord]:
        return view(self._store.records, query)

    async def create_record(self, data: ClientRecordCreate) -> ClientRecord:
        editor = RecordEditor()
        editor.start_create()
        for name, value in data.model_dump().items():
            editor.set_field(name, value)
        record = editor.commit()
        return await self._store.append(record)

    async def update_record(
        self, record_id: str, data: ClientRecordUpdate
    ) -> ClientRecord:
        editor = RecordEditor()
        editor.start_edit(self.get_record(record_id))

        for name, value in data.provided_fields().items():
            if name == "image_data" and value:
                if not editor.attach_image(value):
                    raise ImageCaptureError("image_data must be an inline data:image URL")
                continue
            editor.set_field(name, value)

        record = editor.commit()
        await self._store.replace(record_id, record)
        return record

    async def attach_image(self, record_id: str, payload: str) -> ClientRecord:
        """Replace the record photo with an already-encoded inline image."""
        editor = RecordEditor()
        editor.start_edit(self.get_record(record_id))
        if not editor.attach_image(payload):
            raise ImageCaptureError("Payload is not an inline image")
        record = editor.commit()
        await self._store.replace(record_id, record)
        return record

    async def delete_record(self, record_id: str, *, confirmed: bool) -> bool:
        """Delete a record. Returns False when the operator did not confirm."""
        self.get_record(record_id)
        if not confirmed:
            logger.info("Delete of record %s not confirmed — nothing removed", record_id)
            return False
        try:
            return await self._store.remove(record_id)
        finally:
            self._enrichment.forget(record_id)

    async def generate_insight(self, record_id: str) -> str:
        return await self._enrichment.analyze(record_id)

    def insight_status(self, record_id: str) -> tuple[EnrichmentStatus, str | None]:
        record = self.get_record(record_id)
        return self._enrichment.status(record_id), record.ai_insight
