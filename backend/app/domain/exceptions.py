"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class DraftValidationError(Exception):
    """Raised when a draft is committed without its required fields.

    The draft is kept as-is so the operator can complete it.
    """

    def __init__(self, missing_fields: list[str]):
        self.missing_fields = missing_fields
        super().__init__(
            f"Required fields missing: {', '.join(missing_fields)}"
        )


class PersistenceError(Exception):
    """Raised when the record collection could not be written to durable storage.

    The in-memory change has already been applied when this is raised.
    """

    def __init__(self, storage_key: str, message: str):
        self.storage_key = storage_key
        self.message = message
        super().__init__(f"Could not persist '{storage_key}': {message}")


class EnrichmentError(Exception):
    """Raised when an AI insight could not be produced for a record."""

    def __init__(self, record_id: str, message: str):
        self.record_id = record_id
        self.message = message
        super().__init__(f"Insight for record '{record_id}' failed: {message}")


class EnrichmentInProgressError(EnrichmentError):
    """Raised when an analysis is requested for a record that is already being analyzed."""

    def __init__(self, record_id: str):
        super().__init__(record_id, "analysis already in progress")


class InvalidTransitionError(Exception):
    """Raised when an operator intent is not allowed in the current view mode."""

    def __init__(self, intent: str, mode: str):
        self.intent = intent
        self.mode = mode
        super().__init__(f"Cannot '{intent}' while in {mode} mode")


class ImageCaptureError(Exception):
    """Raised when an uploaded file cannot be turned into an inline image."""


class ChatProviderError(Exception):
    """Raised when a chat provider returns an error.

    Provider-agnostic — works for OpenRouter, Groq, OpenAI, etc.
    """

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{provider}] {status_code}: {message}")
