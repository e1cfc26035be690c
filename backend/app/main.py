"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.application.interfaces import InsightGenerator, KeyValueStorage
from app.application.services import (
    EnrichmentService,
    RecordEditor,
    RecordStore,
    ViewController,
)
from app.config import Settings, get_settings
from app.infrastructure.database import Base, create_engine, create_session_factory
from app.infrastructure.database.repositories import SQLAlchemyKeyValueStorage
from app.infrastructure.llm import OpenRouterInsightGenerator
from app.infrastructure.logging.log_config import setup_logging
from app.infrastructure.openrouter import OpenRouterClient
from app.infrastructure.storage import LocalKeyValueStorage
from app.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


def _build_insight_generator(settings: Settings) -> InsightGenerator | None:
    """Build the OpenRouter-backed generator, or None when no API key is configured."""
    api_key = settings.openrouter_api_key.strip()
    if not api_key:
        logger.warning(
            "OPENROUTER_API_KEY is not configured; client insights are disabled."
        )
        return None

    provider = OpenRouterClient(
        api_key=api_key,
        base_url=settings.openrouter_base_url,
        app_name=settings.openrouter_app_name,
        timeout=settings.insight_timeout_seconds,
    )
    return OpenRouterInsightGenerator(
        chat_provider=provider,
        model=settings.insight_model,
        temperature=settings.insight_temperature,
        max_tokens=settings.insight_max_tokens,
        language=settings.insight_language,
    )


def wire_workspace(
    app: FastAPI,
    storage: KeyValueStorage,
    settings: Settings,
    generator: InsightGenerator | None = None,
) -> RecordStore:
    """Attach the store, enrichment workflow and view controller to ``app.state``."""
    store = RecordStore(storage, settings.storage_key)
    enrichment = EnrichmentService(store, generator)
    app.state.record_store = store
    app.state.enrichment_service = enrichment
    app.state.view_controller = ViewController(store, RecordEditor(), enrichment)
    return store


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — open durable storage, load records, wire services."""
    settings = get_settings()
    setup_logging(settings)

    engine = None
    storage: KeyValueStorage
    if settings.storage_backend == "database":
        engine = create_engine(settings.database_url, echo=(settings.log_level_sql == "DEBUG"))
        if engine.url.get_backend_name() == "sqlite" and engine.url.database not in (None, "", ":memory:"):
            Path(engine.url.database).parent.mkdir(parents=True, exist_ok=True)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        storage = SQLAlchemyKeyValueStorage(create_session_factory(engine))
        logger.info("Using database storage at %s", engine.url.render_as_string(hide_password=True))
    else:
        storage = LocalKeyValueStorage(settings.storage_dir)
        logger.info("Using file storage in '%s'", settings.storage_dir)

    store = wire_workspace(app, storage, settings, _build_insight_generator(settings))
    await store.load_all()

    yield

    if engine is not None:
        await engine.dispose()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="127.0.0.1",
        port=8020,
        reload=True,
    )
