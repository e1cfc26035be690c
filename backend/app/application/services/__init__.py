from .client_record_service import ClientRecordService
from .enrichment_service import EnrichmentService
from .record_editor import RecordEditor
from .record_query import matches, view
from .record_store import RecordStore
from .view_controller import ViewController

__all__ = [
    "ClientRecordService",
    "EnrichmentService",
    "RecordEditor",
    "RecordStore",
    "ViewController",
    "matches",
    "view",
]
