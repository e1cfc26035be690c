from .client_record import (
    ClientRecordCreate,
    ClientRecordResponse,
    ClientRecordUpdate,
    DeleteResult,
    InsightStatusResponse,
    StoredClientRecord,
)
from .workspace import DraftFieldsUpdate, SearchRequest, WorkspaceResponse

__all__ = [
    "ClientRecordCreate",
    "ClientRecordResponse",
    "ClientRecordUpdate",
    "DeleteResult",
    "InsightStatusResponse",
    "StoredClientRecord",
    "DraftFieldsUpdate",
    "SearchRequest",
    "WorkspaceResponse",
]
