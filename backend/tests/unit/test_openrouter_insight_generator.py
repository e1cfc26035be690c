"""Unit tests for the OpenRouterInsightGenerator."""

from datetime import datetime, timezone

import pytest

from app.application.interfaces.chat_provider import ChatProvider
from app.domain.entities import (
    ChatCompletionResult,
    ChatMessage,
    ClientRecord,
    TokenUsage,
)
from app.domain.exceptions import ChatProviderError
from app.infrastructure.llm import OpenRouterInsightGenerator


class FakeChatProvider(ChatProvider):
    """In-memory fake provider that records what it was sent."""

    def __init__(self, *, content: str = "  Sugestão: couro legítimo.  ", error: ChatProviderError | None = None):
        self._content = content
        self._error = error
        self.calls: list[dict] = []

    @property
    def provider_name(self) -> str:
        return "fake"

    async def complete(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> ChatCompletionResult:
        self.calls.append({
            "messages": messages,
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self._error:
            raise self._error
        return ChatCompletionResult(
            model=model,
            content=self._content,
            finish_reason="stop",
            usage=TokenUsage(prompt_tokens=100, completion_tokens=40, total_tokens=140),
            provider="fake",
        )


def _record(**kwargs) -> ClientRecord:
    return ClientRecord(
        name="Carlos Mendes",
        phone="(11) 98765-4321",
        budget_label="R$ 3.500",
        created_at=datetime(2024, 2, 10, tzinfo=timezone.utc),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_generate_insight_returns_stripped_content():
    provider = FakeChatProvider()
    generator = OpenRouterInsightGenerator(provider, "google/gemini-2.5-flash", temperature=0.3, max_tokens=200)

    text = await generator.generate_insight(_record())

    assert text == "Sugestão: couro legítimo."
    call = provider.calls[0]
    assert call["model"] == "google/gemini-2.5-flash"
    assert call["temperature"] == 0.3
    assert call["max_tokens"] == 200


def test_text_only_prompt_lists_fields_and_blanks():
    generator = OpenRouterInsightGenerator(FakeChatProvider(), "m", language="Brazilian Portuguese")

    system, user = generator.build_messages(_record())

    assert "Brazilian Portuguese" in system.content
    assert isinstance(user.content, str)
    assert "- Name: Carlos Mendes" in user.content
    assert "- Budget: R$ 3.500" in user.content
    assert "- E-mail: (not informed)" in user.content
    assert "- Client since: 2024-02-10" in user.content


def test_record_with_photo_is_sent_multimodal():
    generator = OpenRouterInsightGenerator(FakeChatProvider(), "m")
    image = "data:image/jpeg;base64,/9j/4AAQ"

    _, user = generator.build_messages(_record(image_data=image))

    assert isinstance(user.content, list)
    assert user.content[0].type == "image_url"
    assert user.content[0].image_url == {"url": image}
    assert user.content[1].type == "text"


@pytest.mark.asyncio
async def test_provider_errors_propagate():
    provider = FakeChatProvider(error=ChatProviderError("fake", 500, "down"))
    generator = OpenRouterInsightGenerator(provider, "m")

    with pytest.raises(ChatProviderError):
        await generator.generate_insight(_record())
