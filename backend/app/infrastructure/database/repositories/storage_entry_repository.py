"""Concrete KeyValueStorage implementation backed by SQLAlchemy."""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.interfaces import KeyValueStorage
from app.domain.exceptions import PersistenceError
from app.infrastructure.database.models import StorageEntryModel

logger = logging.getLogger(__name__)


class SQLAlchemyKeyValueStorage(KeyValueStorage):
    """Implements the KeyValueStorage port on the 'storage_entries' table.

    Each call opens its own session and commits before returning, so a
    successful ``set`` is durable when it returns.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(self, key: str) -> str | None:
        async with self._session_factory() as session:
            model = await session.get(StorageEntryModel, key)
            return model.value if model else None

    async def set(self, key: str, value: str) -> None:
        try:
            async with self._session_factory() as session:
                model = await session.get(StorageEntryModel, key)
                if model is None:
                    session.add(StorageEntryModel(key=key, value=value))
                else:
                    model.value = value
                    model.updated_at = datetime.now(timezone.utc)
                await session.commit()
        except SQLAlchemyError as exc:
            raise PersistenceError(key, str(exc)) from exc

        logger.debug("Stored key '%s' (%d chars)", key, len(value))
