"""Local storage infrastructure package."""

from .local_key_value_storage import LocalKeyValueStorage

__all__ = ["LocalKeyValueStorage"]
