"""Unit tests for the RecordEditor."""

import dataclasses
from datetime import datetime, timezone

import pytest

from app.application.services.record_editor import RecordEditor
from app.domain.entities import EDITABLE_FIELDS, ClientRecord
from app.domain.exceptions import DraftValidationError


def _stored() -> ClientRecord:
    return ClientRecord(
        name="Ana",
        phone="11999990000",
        email="ana@example.com",
        budget_label="R$ 1.000",
        id="rec-1",
        created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        ai_insight="Insight antigo",
    )


def test_start_create_gives_empty_draft():
    editor = RecordEditor()
    editor.start_create()

    assert editor.draft == {name: "" for name in EDITABLE_FIELDS}
    assert editor.is_editing is False


def test_commit_new_record_assigns_id_and_timestamp():
    editor = RecordEditor()
    editor.start_create()
    editor.set_field("name", "Bruno")
    editor.set_field("phone", "21988887777")

    first = editor.commit()
    second = editor.commit()

    assert first.name == "Bruno"
    assert first.id and first.id != second.id
    assert first.created_at.tzinfo is not None
    assert first.created_at.microsecond % 1000 == 0
    assert first.ai_insight is None


@pytest.mark.parametrize("name, phone, missing", [
    ("", "119", ["name"]),
    ("Ana", "", ["phone"]),
    ("   ", " ", ["name", "phone"]),
])
def test_commit_rejects_missing_required_fields(name, phone, missing):
    editor = RecordEditor()
    editor.start_create()
    editor.set_field("name", name)
    editor.set_field("phone", phone)
    editor.set_field("email", "keep@me.com")

    with pytest.raises(DraftValidationError) as exc_info:
        editor.commit()

    assert exc_info.value.missing_fields == missing
    assert editor.draft["email"] == "keep@me.com"


def test_edit_preserves_id_created_at_and_insight():
    original = _stored()
    editor = RecordEditor()
    editor.start_edit(original)
    editor.set_field("budget_label", "R$ 4.000")

    updated = editor.commit()

    assert updated.id == original.id
    assert updated.created_at == original.created_at
    assert updated.ai_insight == "Insight antigo"
    assert updated.budget_label == "R$ 4.000"


def test_edit_does_not_mutate_the_stored_record():
    original = _stored()
    editor = RecordEditor()
    editor.start_edit(original)
    editor.set_field("name", "Outra")

    editor.commit()

    assert original.name == "Ana"


def test_explicit_empty_value_clears_optional_field():
    editor = RecordEditor()
    editor.start_edit(_stored())
    editor.set_field("email", "")

    assert editor.commit().email == ""


def test_commit_merges_over_newer_base():
    original = _stored()
    editor = RecordEditor()
    editor.start_edit(original)
    editor.set_field("address", "Rua Augusta, 100")
    newer = dataclasses.replace(original, ai_insight="Insight novo")

    updated = editor.commit(base=newer)

    assert updated.ai_insight == "Insight novo"
    assert updated.address == "Rua Augusta, 100"


def test_commit_rejects_base_of_another_record():
    editor = RecordEditor()
    editor.start_edit(_stored())

    with pytest.raises(ValueError):
        editor.commit(base=ClientRecord(name="X", phone="1", id="other"))


def test_set_unknown_field_raises():
    editor = RecordEditor()

    with pytest.raises(ValueError):
        editor.set_field("ai_insight", "x")


def test_attach_image_accepts_only_inline_images():
    editor = RecordEditor()
    editor.start_create()

    assert editor.attach_image("data:image/jpeg;base64,/9j/") is True
    assert editor.attach_image("https://example.com/a.jpg") is False
    assert editor.attach_image("data:text/plain;base64,AAAA") is False
    assert editor.draft["image_data"] == "data:image/jpeg;base64,/9j/"


def test_draft_property_is_a_copy():
    editor = RecordEditor()
    editor.start_create()

    editor.draft["name"] = "Hacked"

    assert editor.draft["name"] == ""


def test_reset_clears_editing_association():
    editor = RecordEditor()
    editor.start_edit(_stored())

    editor.reset()

    assert editor.editing_id is None
    assert editor.draft["name"] == ""
