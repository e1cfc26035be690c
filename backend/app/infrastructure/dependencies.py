"""FastAPI dependency injection — wires infrastructure to application layer.

The store, the enrichment workflow and the operator workspace are
process-wide singletons created in the lifespan and kept on ``app.state``;
request-scoped services are built around them here.
"""

from fastapi import Request

from app.application.services import (
    ClientRecordService,
    EnrichmentService,
    RecordStore,
    ViewController,
)
from app.config import get_settings
from app.infrastructure.imaging import DataUrlImageEncoder


def get_record_store(request: Request) -> RecordStore:
    return request.app.state.record_store


def get_enrichment_service(request: Request) -> EnrichmentService:
    return request.app.state.enrichment_service


def get_view_controller(request: Request) -> ViewController:
    """The single operator workspace of this local, single-user app."""
    return request.app.state.view_controller


def get_client_record_service(request: Request) -> ClientRecordService:
    """Provides a ClientRecordService bound to the shared store and enrichment workflow."""
    return ClientRecordService(
        store=get_record_store(request),
        enrichment=get_enrichment_service(request),
    )


def get_image_encoder() -> DataUrlImageEncoder:
    settings = get_settings()
    return DataUrlImageEncoder(max_bytes=settings.max_image_bytes)
