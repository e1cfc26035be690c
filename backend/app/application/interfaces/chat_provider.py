"""Abstract chat provider interface — port for AI provider adapters.

This interface enables multi-provider support. Each AI provider
(OpenRouter, Groq, OpenAI, etc.) implements this interface.
"""

from abc import ABC, abstractmethod

from app.domain.entities import ChatMessage, ChatCompletionResult


class ChatProvider(ABC):
    """Port — defines what the application layer needs from any chat provider."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique name identifying this provider (e.g. 'openrouter', 'groq')."""
        ...

    @abstractmethod
    async def complete(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> ChatCompletionResult:
        """Send a non-streaming chat completion request.

        Args:
            messages: The conversation history.
            model: The model identifier (e.g. 'google/gemini-2.5-flash').
            temperature: Sampling temperature (0.0–2.0).
            max_tokens: Maximum tokens in the response.

        Returns:
            A ChatCompletionResult with content, usage, and cost.

        Raises:
            ChatProviderError: If the provider returns an error.
        """
        ...
