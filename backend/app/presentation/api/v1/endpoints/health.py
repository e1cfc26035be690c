"""Health check endpoint — no dependencies, always available."""

from fastapi import APIRouter, Request

from app.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Returns the current application health status."""
    settings = get_settings()
    store = getattr(request.app.state, "record_store", None)
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "storage_backend": settings.storage_backend,
        "records_loaded": len(store) if store is not None else 0,
    }
