"""Abstract interface (port) for the durable key/value slot holding the record collection."""

from abc import ABC, abstractmethod


class KeyValueStorage(ABC):
    """Port for durable storage — implemented in the infrastructure layer.

    A key holds one textual payload that is overwritten wholesale on
    every write.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the payload stored under ``key``, or None when nothing was ever written."""
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Replace the payload stored under ``key``.

        Raises:
            PersistenceError: If the write could not be completed.
        """
        ...
