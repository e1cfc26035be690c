from .storage_entry_repository import SQLAlchemyKeyValueStorage

__all__ = [
    "SQLAlchemyKeyValueStorage",
]
