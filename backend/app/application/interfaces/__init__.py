from .chat_provider import ChatProvider
from .insight_generator import InsightGenerator
from .key_value_storage import KeyValueStorage

__all__ = [
    "ChatProvider",
    "InsightGenerator",
    "KeyValueStorage",
]
