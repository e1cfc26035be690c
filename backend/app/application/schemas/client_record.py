"""Pydantic DTOs (Data Transfer Objects) for the ClientRecord feature."""

from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator

from app.domain.entities import EnrichmentStatus

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class StoredClientRecord(BaseModel):
    """One element of the persisted collection.

    Uses the key names of the original browser client (``whatsapp``,
    ``budget``, ``observation``, ``image``, ``createdAt`` as epoch
    milliseconds) so existing exports load unchanged.
    """

    id: str = Field(..., min_length=1)
    name: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    whatsapp_handle: str = Field("", alias="whatsapp")
    budget_label: str = Field("", alias="budget")
    technical_notes: str = Field("", alias="observation")
    image_data: str = Field("", alias="image")
    created_at: datetime = Field(..., alias="createdAt")
    ai_insight: str | None = Field(None, alias="aiInsight")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator(
        "name", "phone", "email", "address", "whatsapp_handle",
        "budget_label", "technical_notes", "image_data",
        mode="before",
    )
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("created_at", mode="before")
    @classmethod
    def _from_epoch_ms(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return _EPOCH + timedelta(milliseconds=value)
        if isinstance(value, float):
            return _EPOCH + timedelta(milliseconds=round(value))
        return value

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @field_serializer("created_at")
    def _to_epoch_ms(self, value: datetime) -> int:
        return (value - _EPOCH) // timedelta(milliseconds=1)


class ClientRecordCreate(BaseModel):
    """Schema for creating a new client record.

    Required fields are checked by the record editor, not here, so that a
    missing name or phone is reported the same way on every surface.
    """

    name: str = Field("", max_length=200, examples=["Carlos Mendes"])
    phone: str = Field("", max_length=50, examples=["(11) 98765-4321"])
    email: str = Field("", max_length=255)
    address: str = Field("", max_length=500)
    whatsapp_handle: str = Field("", max_length=50)
    budget_label: str = Field("", max_length=100, examples=["R$ 3.500"])
    technical_notes: str = Field("", examples=["Bancos dianteiros em couro ecológico preto"])


class ClientRecordUpdate(BaseModel):
    """Schema for updating an existing client record — all fields optional.

    ``None`` means "not provided, keep the stored value"; an empty string
    clears the field.
    """

    name: str | None = Field(None, max_length=200)
    phone: str | None = Field(None, max_length=50)
    email: str | None = Field(None, max_length=255)
    address: str | None = Field(None, max_length=500)
    whatsapp_handle: str | None = Field(None, max_length=50)
    budget_label: str | None = Field(None, max_length=100)
    technical_notes: str | None = None
    image_data: str | None = None

    def provided_fields(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)


class ClientRecordResponse(BaseModel):
    """Schema returned to the client."""

    id: str
    name: str
    phone: str
    email: str
    address: str
    whatsapp_handle: str
    budget_label: str
    technical_notes: str
    image_data: str
    created_at: datetime
    ai_insight: str | None

    model_config = {"from_attributes": True}


class InsightStatusResponse(BaseModel):
    """Enrichment state of one record."""

    record_id: str
    status: EnrichmentStatus
    ai_insight: str | None = None


class DeleteResult(BaseModel):
    """Outcome of a delete request; ``deleted`` is False when confirmation was declined."""

    record_id: str
    deleted: bool
