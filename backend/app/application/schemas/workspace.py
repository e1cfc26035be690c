"""Pydantic DTOs for the stateful operator workspace (view controller)."""

from pydantic import BaseModel, Field

from app.application.schemas.client_record import ClientRecordResponse
from app.domain.entities import ViewMode


class DraftFieldsUpdate(BaseModel):
    """Partial draft edit — only the provided fields are written."""

    name: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    whatsapp_handle: str | None = None
    budget_label: str | None = None
    technical_notes: str | None = None


class SearchRequest(BaseModel):
    query: str = Field("", max_length=200)


class WorkspaceResponse(BaseModel):
    """Everything a screen needs to render the current mode."""

    mode: ViewMode
    editing: bool
    selected_id: str | None
    query: str
    draft: dict[str, str] | None = None
    selected_record: ClientRecordResponse | None = None
    records: list[ClientRecordResponse] = Field(default_factory=list)
    analyzing_ids: list[str] = Field(default_factory=list)
