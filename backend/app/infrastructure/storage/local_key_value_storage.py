"""Local filesystem key/value storage — one JSON file per key.

Storage layout:
    <storage_dir>/<sanitised_key>.json
"""

import logging
import os
import re
import tempfile
from pathlib import Path

from app.application.interfaces import KeyValueStorage
from app.domain.exceptions import PersistenceError

logger = logging.getLogger(__name__)


def _sanitise(name: str, max_len: int = 80) -> str:
    """Replace non-word characters with underscores and truncate."""
    return re.sub(r"[^\w\-]", "_", name)[:max_len].strip("_") or "unnamed"


class LocalKeyValueStorage(KeyValueStorage):
    """Infrastructure adapter for key/value storage on the local disk.

    Writes go to a temporary file in the same directory and are renamed
    over the target, so a crash never leaves a half-written payload.
    """

    def __init__(self, storage_dir: str):
        self._storage_dir = Path(storage_dir)
        self._storage_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self._storage_dir / f"{_sanitise(key)}.json"

    async def get(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read %s: %s", path, exc)
            return None

    async def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._storage_dir,
                prefix=f".{path.stem}_",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(value)
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise PersistenceError(key, str(exc)) from exc

        logger.debug("Stored key '%s' at %s (%d chars)", key, path, len(value))
