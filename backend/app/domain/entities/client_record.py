"""Domain entity — pure Python business object for a leather-goods client."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4

# Fields the operator can edit through a draft. id, created_at and
# ai_insight are owned by the record lifecycle, never by the form.
EDITABLE_FIELDS: tuple[str, ...] = (
    "name",
    "phone",
    "email",
    "address",
    "whatsapp_handle",
    "budget_label",
    "technical_notes",
    "image_data",
)

REQUIRED_FIELDS: tuple[str, ...] = ("name", "phone")

RecordDraft = dict[str, str]


def utc_now_ms() -> datetime:
    """Current UTC instant truncated to millisecond precision (storage resolution)."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def new_record_id() -> str:
    return uuid4().hex


@dataclass
class ClientRecord:
    """Core domain entity for one client of the workshop.

    Contact fields plus project metadata (budget, technical notes, a photo
    of the vehicle or piece) and an optional AI-generated commercial insight.
    """

    name: str
    phone: str
    email: str = ""
    address: str = ""
    whatsapp_handle: str = ""
    budget_label: str = ""
    technical_notes: str = ""
    image_data: str = ""
    id: str = field(default_factory=new_record_id)
    created_at: datetime = field(default_factory=utc_now_ms)
    ai_insight: str | None = None

    def editable_fields(self) -> RecordDraft:
        """Copy of the operator-editable fields, as used to seed a draft."""
        return {name: getattr(self, name) for name in EDITABLE_FIELDS}

    @property
    def has_image(self) -> bool:
        return bool(self.image_data)
