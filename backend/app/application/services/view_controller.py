"""View controller — the operator's navigation state machine.

Modes and transitions:

    LIST   --create-->      FORM(editing=False)
    LIST   --select(id)-->  DETAIL(id)
    LIST   --edit(id)-->    FORM(editing=True)
    DETAIL --edit-->        FORM(editing=True)
    FORM   --submit-->      LIST   (only when the draft is valid)
    FORM   --cancel-->      LIST
    DETAIL --delete-->      LIST   (only when confirmed)
    any    --back-->        LIST

Entering LIST always clears the draft and the selection.
"""

import logging
from dataclasses import replace

from app.application.services.enrichment_service import EnrichmentService
from app.application.services.record_editor import RecordEditor
from app.application.services.record_query import view
from app.application.services.record_store import RecordStore
from app.domain.entities import ClientRecord, RecordDraft, ViewMode, ViewState
from app.domain.exceptions import EntityNotFoundError, InvalidTransitionError
from app.infrastructure.logging.colored_logger import WorkflowLogger, WorkflowStage

logger = logging.getLogger(__name__)
plog = WorkflowLogger("ViewController")


class ViewController:
    """Mediates operator intents between the editor, the store, the query engine and enrichment."""

    def __init__(
        self,
        store: RecordStore,
        editor: RecordEditor,
        enrichment: EnrichmentService,
    ):
        self._store = store
        self._editor = editor
        self._enrichment = enrichment
        self._state = ViewState()

    # ── State ───────────────────────────────────────────────────────

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def mode(self) -> ViewMode:
        return self._state.mode

    @property
    def draft(self) -> RecordDraft | None:
        if self._state.mode is not ViewMode.FORM:
            return None
        return self._editor.draft

    @property
    def selected_record(self) -> ClientRecord | None:
        """The selected record as currently stored (always the canonical copy)."""
        if self._state.selected_id is None:
            return None
        return self._store.get(self._state.selected_id)

    @property
    def visible_records(self) -> list[ClientRecord]:
        return view(self._store.records, self._state.query)

    def analyzing_ids(self) -> list[str]:
        return self._enrichment.analyzing_ids()

    # ── Navigation ──────────────────────────────────────────────────

    def create(self) -> None:
        self._require("create", ViewMode.LIST)
        self._editor.start_create()
        self._state = replace(self._state, mode=ViewMode.FORM, editing=False, selected_id=None)

    def select(self, record_id: str) -> ClientRecord:
        self._require("select", ViewMode.LIST)
        record = self._lookup(record_id)
        self._state = replace(self._state, mode=ViewMode.DETAIL, editing=False, selected_id=record_id)
        return record

    def edit(self, record_id: str | None = None) -> None:
        """Open the form on an existing record.

        From DETAIL the selected record is edited; from LIST an explicit id
        is required (the list cards carry their own edit button).
        """
        self._require("edit", ViewMode.LIST, ViewMode.DETAIL)
        if self._state.mode is ViewMode.DETAIL:
            if record_id is not None and record_id != self._state.selected_id:
                raise InvalidTransitionError("edit another record", self._state.mode.value)
            record_id = self._state.selected_id
        elif record_id is None:
            raise InvalidTransitionError("edit without a record", self._state.mode.value)

        record = self._lookup(record_id)
        self._editor.start_edit(record)
        self._state = replace(self._state, mode=ViewMode.FORM, editing=True, selected_id=record_id)

    def back(self) -> None:
        """Logo / back button — always returns to the list."""
        self._to_list()

    def search(self, text: str) -> list[ClientRecord]:
        self._state = replace(self._state, query=text)
        return self.visible_records

    # ── Form ────────────────────────────────────────────────────────

    def set_field(self, name: str, value: str) -> None:
        self._require("set_field", ViewMode.FORM)
        self._editor.set_field(name, value)

    def attach_image(self, payload: str) -> bool:
        self._require("attach_image", ViewMode.FORM)
        return self._editor.attach_image(payload)

    async def submit(self) -> ClientRecord:
        """Commit the draft into the store and return to the list.

        A DraftValidationError leaves the controller in FORM with the draft
        untouched. A PersistenceError still returns to the list: the change
        is already live in memory.
        """
        self._require("submit", ViewMode.FORM)

        if self._editor.is_editing:
            editing_id = self._editor.editing_id
            record = self._editor.commit(base=self._store.get(editing_id))
            try:
                replaced = await self._store.replace(editing_id, record)
            finally:
                self._to_list()
            if not replaced:
                logger.warning("Edited record %s no longer exists — update discarded", editing_id)
            else:
                plog.step_complete(WorkflowStage.EDITOR, f"Saved changes to '{record.name}'", id=record.id)
            return record

        record = self._editor.commit()
        try:
            await self._store.append(record)
        finally:
            self._to_list()
        plog.step_complete(WorkflowStage.EDITOR, f"Registered new client '{record.name}'", id=record.id)
        return record

    def cancel(self) -> None:
        self._require("cancel", ViewMode.FORM)
        self._to_list()

    # ── Destructive / async intents ─────────────────────────────────

    async def delete(self, record_id: str, confirmed: bool) -> bool:
        """Delete a record once the operator has confirmed.

        Returns False without touching anything when confirmation was declined.
        """
        self._require("delete", ViewMode.LIST, ViewMode.DETAIL)
        if not confirmed:
            logger.info("Delete of record %s declined by operator", record_id)
            return False

        self._lookup(record_id)
        was_selected = self._state.selected_id == record_id
        try:
            removed = await self._store.remove(record_id)
        finally:
            self._enrichment.forget(record_id)
            if was_selected:
                self._to_list()
        return removed

    async def analyze(self, record_id: str) -> str:
        """Request an insight for ``record_id``; allowed from any mode."""
        return await self._enrichment.analyze(record_id)

    # ── Helpers ─────────────────────────────────────────────────────

    def _to_list(self) -> None:
        self._editor.reset()
        self._state = ViewState(query=self._state.query)

    def _require(self, intent: str, *modes: ViewMode) -> None:
        if self._state.mode not in modes:
            raise InvalidTransitionError(intent, self._state.mode.value)

    def _lookup(self, record_id: str) -> ClientRecord:
        record = self._store.get(record_id)
        if record is None:
            raise EntityNotFoundError("ClientRecord", record_id)
        return record
