from .chat_message import ChatMessage, ContentPart, TokenUsage, ChatCompletionResult
from .client_record import (
    EDITABLE_FIELDS,
    REQUIRED_FIELDS,
    ClientRecord,
    RecordDraft,
    new_record_id,
    utc_now_ms,
)
from .enrichment import EnrichmentStatus
from .view_state import ViewMode, ViewState

__all__ = [
    "ChatMessage",
    "ContentPart",
    "TokenUsage",
    "ChatCompletionResult",
    "EDITABLE_FIELDS",
    "REQUIRED_FIELDS",
    "ClientRecord",
    "RecordDraft",
    "new_record_id",
    "utc_now_ms",
    "EnrichmentStatus",
    "ViewMode",
    "ViewState",
]
