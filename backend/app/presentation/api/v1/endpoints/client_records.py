"""Client record CRUD endpoints."""

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from app.application.schemas.client_record import (
    ClientRecordCreate,
    ClientRecordResponse,
    ClientRecordUpdate,
    DeleteResult,
    InsightStatusResponse,
)
from app.application.services import ClientRecordService
from app.domain.exceptions import (
    DraftValidationError,
    EnrichmentError,
    EnrichmentInProgressError,
    EntityNotFoundError,
    ImageCaptureError,
    PersistenceError,
)
from app.infrastructure.dependencies import get_client_record_service, get_image_encoder
from app.infrastructure.imaging import DataUrlImageEncoder

router = APIRouter(prefix="/client-records", tags=["Client Records"])


def _not_saved(e: PersistenceError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Change applied but not saved to disk: {e.message}",
    )


@router.get("", response_model=list[ClientRecordResponse])
async def list_records(
    q: str = Query("", max_length=200, description="Search by name, phone or e-mail"),
    service: ClientRecordService = Depends(get_client_record_service),
) -> list[ClientRecordResponse]:
    """List client records matching ``q``, newest first."""
    records = service.list_records(q)
    return [
        ClientRecordResponse.model_validate(r, from_attributes=True) for r in records
    ]


@router.get("/{record_id}", response_model=ClientRecordResponse)
async def get_record(
    record_id: str,
    service: ClientRecordService = Depends(get_client_record_service),
) -> ClientRecordResponse:
    """Retrieve a single client record by ID."""
    try:
        record = service.get_record(record_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ClientRecordResponse.model_validate(record, from_attributes=True)


@router.post("", response_model=ClientRecordResponse, status_code=status.HTTP_201_CREATED)
async def create_record(
    data: ClientRecordCreate,
    service: ClientRecordService = Depends(get_client_record_service),
) -> ClientRecordResponse:
    """Create a new client record."""
    try:
        record = await service.create_record(data)
    except DraftValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except PersistenceError as e:
        raise _not_saved(e)
    return ClientRecordResponse.model_validate(record, from_attributes=True)


@router.put("/{record_id}", response_model=ClientRecordResponse)
async def update_record(
    record_id: str,
    data: ClientRecordUpdate,
    service: ClientRecordService = Depends(get_client_record_service),
) -> ClientRecordResponse:
    """Update an existing client record; omitted fields keep their value."""
    try:
        record = await service.update_record(record_id, data)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except (DraftValidationError, ImageCaptureError) as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except PersistenceError as e:
        raise _not_saved(e)
    return ClientRecordResponse.model_validate(record, from_attributes=True)


@router.delete("/{record_id}", response_model=DeleteResult)
async def delete_record(
    record_id: str,
    confirmed: bool = Query(False, description="Must be true to actually delete"),
    service: ClientRecordService = Depends(get_client_record_service),
) -> DeleteResult:
    """Delete a client record. Without confirmation nothing is removed."""
    try:
        deleted = await service.delete_record(record_id, confirmed=confirmed)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PersistenceError as e:
        raise _not_saved(e)
    return DeleteResult(record_id=record_id, deleted=deleted)


@router.post("/{record_id}/image", response_model=ClientRecordResponse)
async def upload_image(
    record_id: str,
    file: UploadFile = File(...),
    service: ClientRecordService = Depends(get_client_record_service),
    encoder: DataUrlImageEncoder = Depends(get_image_encoder),
) -> ClientRecordResponse:
    """Attach a photo (of the vehicle or piece) to a client record."""
    # One byte past the limit is enough for the encoder to reject the file.
    content = await file.read(encoder.max_bytes + 1)
    try:
        service.get_record(record_id)
        payload = encoder.encode(content, file.filename or "", file.content_type)
        record = await service.attach_image(record_id, payload)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ImageCaptureError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except PersistenceError as e:
        raise _not_saved(e)
    return ClientRecordResponse.model_validate(record, from_attributes=True)


@router.post("/{record_id}/insight", response_model=InsightStatusResponse)
async def generate_insight(
    record_id: str,
    service: ClientRecordService = Depends(get_client_record_service),
) -> InsightStatusResponse:
    """Generate (or regenerate) the AI commercial insight for a record."""
    try:
        text = await service.generate_insight(record_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except EnrichmentInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except EnrichmentError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not generate insight, try again: {e.message}",
        )
    except PersistenceError as e:
        raise _not_saved(e)
    try:
        state, _ = service.insight_status(record_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return InsightStatusResponse(record_id=record_id, status=state, ai_insight=text)


@router.get("/{record_id}/insight", response_model=InsightStatusResponse)
async def get_insight_status(
    record_id: str,
    service: ClientRecordService = Depends(get_client_record_service),
) -> InsightStatusResponse:
    """Current enrichment state and insight of a record."""
    try:
        state, insight = service.insight_status(record_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return InsightStatusResponse(record_id=record_id, status=state, ai_insight=insight)
