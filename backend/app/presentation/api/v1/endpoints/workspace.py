"""Operator workspace endpoints — drive the single view controller of this app.

Each intent returns the full workspace so the front end can re-render the
current mode without extra requests.
"""

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from app.application.schemas.client_record import ClientRecordResponse
from app.application.schemas.workspace import DraftFieldsUpdate, SearchRequest, WorkspaceResponse
from app.application.services import ViewController
from app.domain.exceptions import (
    DraftValidationError,
    EnrichmentError,
    EnrichmentInProgressError,
    EntityNotFoundError,
    ImageCaptureError,
    InvalidTransitionError,
    PersistenceError,
)
from app.infrastructure.dependencies import get_image_encoder, get_view_controller
from app.infrastructure.imaging import DataUrlImageEncoder

router = APIRouter(prefix="/workspace", tags=["Workspace"])


def _snapshot(controller: ViewController) -> WorkspaceResponse:
    state = controller.state
    selected = controller.selected_record
    return WorkspaceResponse(
        mode=state.mode,
        editing=state.editing,
        selected_id=state.selected_id,
        query=state.query,
        draft=controller.draft,
        selected_record=(
            ClientRecordResponse.model_validate(selected, from_attributes=True)
            if selected is not None
            else None
        ),
        records=[
            ClientRecordResponse.model_validate(r, from_attributes=True)
            for r in controller.visible_records
        ],
        analyzing_ids=controller.analyzing_ids(),
    )


def _conflict(e: InvalidTransitionError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


def _not_found(e: EntityNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _not_saved(e: PersistenceError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Change applied but not saved to disk: {e.message}",
    )


@router.get("", response_model=WorkspaceResponse)
async def get_workspace(
    controller: ViewController = Depends(get_view_controller),
) -> WorkspaceResponse:
    return _snapshot(controller)


@router.post("/create", response_model=WorkspaceResponse)
async def start_create(
    controller: ViewController = Depends(get_view_controller),
) -> WorkspaceResponse:
    """Open an empty form for a new client."""
    try:
        controller.create()
    except InvalidTransitionError as e:
        raise _conflict(e)
    return _snapshot(controller)


@router.post("/select/{record_id}", response_model=WorkspaceResponse)
async def select_record(
    record_id: str,
    controller: ViewController = Depends(get_view_controller),
) -> WorkspaceResponse:
    """Open the detail view of a client."""
    try:
        controller.select(record_id)
    except InvalidTransitionError as e:
        raise _conflict(e)
    except EntityNotFoundError as e:
        raise _not_found(e)
    return _snapshot(controller)


@router.post("/edit", response_model=WorkspaceResponse)
async def start_edit(
    record_id: str | None = Query(None, description="Required when editing from the list"),
    controller: ViewController = Depends(get_view_controller),
) -> WorkspaceResponse:
    """Open the form on an existing client."""
    try:
        controller.edit(record_id)
    except InvalidTransitionError as e:
        raise _conflict(e)
    except EntityNotFoundError as e:
        raise _not_found(e)
    return _snapshot(controller)


@router.patch("/draft", response_model=WorkspaceResponse)
async def update_draft(
    data: DraftFieldsUpdate,
    controller: ViewController = Depends(get_view_controller),
) -> WorkspaceResponse:
    """Write the provided fields into the draft; nothing is validated yet."""
    try:
        for name, value in data.model_dump(exclude_none=True).items():
            controller.set_field(name, value)
    except InvalidTransitionError as e:
        raise _conflict(e)
    return _snapshot(controller)


@router.post("/draft/image", response_model=WorkspaceResponse)
async def attach_draft_image(
    file: UploadFile = File(...),
    controller: ViewController = Depends(get_view_controller),
    encoder: DataUrlImageEncoder = Depends(get_image_encoder),
) -> WorkspaceResponse:
    """Attach a photo to the draft. A rejected file leaves the draft image unchanged."""
    # One byte past the limit is enough for the encoder to reject the file.
    content = await file.read(encoder.max_bytes + 1)
    try:
        payload = encoder.encode(content, file.filename or "", file.content_type)
        controller.attach_image(payload)
    except InvalidTransitionError as e:
        raise _conflict(e)
    except ImageCaptureError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return _snapshot(controller)


@router.post("/submit", response_model=WorkspaceResponse)
async def submit_draft(
    controller: ViewController = Depends(get_view_controller),
) -> WorkspaceResponse:
    """Save the draft and return to the list."""
    try:
        await controller.submit()
    except InvalidTransitionError as e:
        raise _conflict(e)
    except DraftValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(e), "missing_fields": e.missing_fields},
        )
    except PersistenceError as e:
        raise _not_saved(e)
    return _snapshot(controller)


@router.post("/cancel", response_model=WorkspaceResponse)
async def cancel_draft(
    controller: ViewController = Depends(get_view_controller),
) -> WorkspaceResponse:
    try:
        controller.cancel()
    except InvalidTransitionError as e:
        raise _conflict(e)
    return _snapshot(controller)


@router.post("/back", response_model=WorkspaceResponse)
async def back_to_list(
    controller: ViewController = Depends(get_view_controller),
) -> WorkspaceResponse:
    """Logo / back button."""
    controller.back()
    return _snapshot(controller)


@router.post("/search", response_model=WorkspaceResponse)
async def search(
    data: SearchRequest,
    controller: ViewController = Depends(get_view_controller),
) -> WorkspaceResponse:
    controller.search(data.query)
    return _snapshot(controller)


@router.post("/delete/{record_id}", response_model=WorkspaceResponse)
async def delete_record(
    record_id: str,
    confirmed: bool = Query(False, description="Operator confirmation; false aborts"),
    controller: ViewController = Depends(get_view_controller),
) -> WorkspaceResponse:
    try:
        await controller.delete(record_id, confirmed)
    except InvalidTransitionError as e:
        raise _conflict(e)
    except EntityNotFoundError as e:
        raise _not_found(e)
    except PersistenceError as e:
        raise _not_saved(e)
    return _snapshot(controller)


@router.post("/analyze/{record_id}", response_model=WorkspaceResponse)
async def analyze_record(
    record_id: str,
    controller: ViewController = Depends(get_view_controller),
) -> WorkspaceResponse:
    """Generate the AI insight for a record; other requests keep being served meanwhile."""
    try:
        await controller.analyze(record_id)
    except EntityNotFoundError as e:
        raise _not_found(e)
    except EnrichmentInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except EnrichmentError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not generate insight, try again: {e.message}",
        )
    except PersistenceError as e:
        raise _not_saved(e)
    return _snapshot(controller)
