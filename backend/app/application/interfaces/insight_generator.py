"""Abstract interface (port) for producing an AI commercial insight from a client record."""

from abc import ABC, abstractmethod

from app.domain.entities import ClientRecord


class InsightGenerator(ABC):
    """Port for the external text-generation collaborator."""

    @abstractmethod
    async def generate_insight(self, record: ClientRecord) -> str:
        """Return free-form advisory text for ``record``.

        Raises:
            ChatProviderError: If the provider rejects the request.
            httpx.HTTPError: If the provider cannot be reached.
        """
        ...
