"""Record editor — owns the in-progress draft for create and update."""

import dataclasses
import logging

from app.domain.entities import (
    EDITABLE_FIELDS,
    REQUIRED_FIELDS,
    ClientRecord,
    RecordDraft,
    new_record_id,
    utc_now_ms,
)
from app.domain.exceptions import DraftValidationError

logger = logging.getLogger(__name__)

_INLINE_IMAGE_PREFIX = "data:image/"


def _empty_draft() -> RecordDraft:
    return {name: "" for name in EDITABLE_FIELDS}


class RecordEditor:
    """Holds one mutable draft and turns it into a committed ClientRecord.

    The editor never touches the store: ``commit`` returns the record and
    the caller routes it to ``RecordStore.append`` or ``RecordStore.replace``.
    """

    def __init__(self) -> None:
        self._draft: RecordDraft = _empty_draft()
        self._original: ClientRecord | None = None

    @property
    def draft(self) -> RecordDraft:
        return dict(self._draft)

    @property
    def editing_id(self) -> str | None:
        return self._original.id if self._original is not None else None

    @property
    def is_editing(self) -> bool:
        return self._original is not None

    def start_create(self) -> None:
        """Reset the draft to defaults and forget any record being edited."""
        self._draft = _empty_draft()
        self._original = None

    def start_edit(self, record: ClientRecord) -> None:
        """Load a copy of ``record`` into the draft and remember its id."""
        self._draft = record.editable_fields()
        self._original = dataclasses.replace(record)

    def set_field(self, name: str, value: str) -> None:
        """Update one draft field. Values are only checked at commit time."""
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown record field: {name!r}")
        self._draft[name] = value

    def attach_image(self, payload: str) -> bool:
        """Set the draft image from an inline ``data:image/...`` payload.

        Anything else is ignored and the current image is kept.
        """
        if not isinstance(payload, str) or not payload.startswith(_INLINE_IMAGE_PREFIX):
            logger.warning("Ignoring non-image payload for draft image")
            return False
        self._draft["image_data"] = payload
        return True

    def validate(self) -> None:
        missing = [f for f in REQUIRED_FIELDS if not self._draft.get(f, "").strip()]
        if missing:
            raise DraftValidationError(missing)

    def commit(self, base: ClientRecord | None = None) -> ClientRecord:
        """Validate the draft and produce the record to store.

        When editing, draft fields are merged over ``base`` (by default the
        record passed to ``start_edit``), keeping its id, creation time and
        insight. Explicit empty values overwrite. When creating, a new id and
        creation instant are assigned.

        Raises:
            DraftValidationError: name or phone is empty; the draft is kept.
        """
        self.validate()

        if self._original is not None:
            target = base if base is not None else self._original
            if target.id != self._original.id:
                raise ValueError(
                    f"Merge base {target.id} does not match edited record {self._original.id}"
                )
            record = dataclasses.replace(target, **self._draft)
            logger.debug("Draft committed as update of %s", record.id)
            return record

        record = ClientRecord(
            **self._draft,
            id=new_record_id(),
            created_at=utc_now_ms(),
        )
        logger.debug("Draft committed as new record %s", record.id)
        return record

    def reset(self) -> None:
        """Clear the draft and the editing association."""
        self.start_create()
