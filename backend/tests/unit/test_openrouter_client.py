"""Unit tests for the OpenRouterClient."""

import json

import httpx
import pytest

from app.infrastructure.openrouter.openrouter_client import OpenRouterClient
from app.domain.entities import ChatMessage, ContentPart
from app.domain.exceptions import ChatProviderError


# ── Helpers ──


def _mock_openrouter_response(
    content: str = "Hello!",
    model: str = "google/gemini-2.5-flash",
    prompt_tokens: int = 10,
    completion_tokens: int = 5,
    total_tokens: int = 15,
    cost: float | None = 0.00014,
) -> dict:
    """Build a mock OpenRouter JSON response."""
    return {
        "id": "chatcmpl-test123",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "model": model,
        "usage": {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": total_tokens,
            **({
                "cost": cost,
            } if cost is not None else {}),
        },
    }


def _make_mock_transport(
    response_data: dict | None = None,
    status_code: int = 200,
    error_data: dict | None = None,
    captured: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """Create a mock transport that returns a fixed response."""

    def handler(request: httpx.Request) -> httpx.Response:
        if captured is not None:
            captured.append(request)
        if error_data:
            return httpx.Response(status_code, json=error_data)
        return httpx.Response(status_code, json=response_data or {})

    return httpx.MockTransport(handler)


# ── Tests ──


@pytest.mark.asyncio
async def test_complete_parses_response():
    """Non-streaming call correctly parses OpenRouter JSON response."""
    response_data = _mock_openrouter_response(content="Ofereça couro náutico.")
    transport = _make_mock_transport(response_data)
    client = OpenRouterClient(
        api_key="test-key",
        http_client=httpx.AsyncClient(transport=transport),
    )

    result = await client.complete(
        messages=[ChatMessage(role="user", content="Cliente: Ana")],
        model="google/gemini-2.5-flash",
    )

    assert result.content == "Ofereça couro náutico."
    assert result.model == "google/gemini-2.5-flash"
    assert result.usage.prompt_tokens == 10
    assert result.usage.completion_tokens == 5
    assert result.usage.total_tokens == 15
    assert result.usage.cost == 0.00014
    assert result.provider == "openrouter"


@pytest.mark.asyncio
async def test_complete_error_handling():
    """Non-streaming call raises ChatProviderError on 4xx/5xx."""
    error_data = {"error": {"code": 429, "message": "Rate limit exceeded"}}
    transport = _make_mock_transport(error_data=error_data, status_code=429)
    client = OpenRouterClient(
        api_key="test-key",
        http_client=httpx.AsyncClient(transport=transport),
    )

    with pytest.raises(ChatProviderError) as exc_info:
        await client.complete(
            messages=[ChatMessage(role="user", content="Hi")],
            model="google/gemini-2.5-flash",
        )

    assert exc_info.value.status_code == 429
    assert "Rate limit" in exc_info.value.message


@pytest.mark.asyncio
async def test_complete_without_choices_raises():
    transport = _make_mock_transport({"model": "x", "choices": []})
    client = OpenRouterClient(
        api_key="test-key",
        http_client=httpx.AsyncClient(transport=transport),
    )

    with pytest.raises(ChatProviderError):
        await client.complete([ChatMessage(role="user", content="Hi")], "x")


@pytest.mark.asyncio
async def test_complete_multimodal_message_serialization():
    """Inline images are sent as image_url parts alongside the text."""
    captured: list[httpx.Request] = []
    transport = _make_mock_transport(
        _mock_openrouter_response(content="Banco desgastado."), captured=captured
    )
    client = OpenRouterClient(
        api_key="test-key",
        app_name="JM Couros",
        http_client=httpx.AsyncClient(transport=transport),
    )

    result = await client.complete(
        messages=[
            ChatMessage(
                role="user",
                content=[
                    ContentPart(
                        type="image_url",
                        image_url={"url": "data:image/png;base64,iVBORw0KGgo="},
                    ),
                    ContentPart(type="text", text="Avalie o estado do banco."),
                ],
            )
        ],
        model="google/gemini-2.5-flash",
        temperature=0.7,
        max_tokens=600,
    )

    assert result.content == "Banco desgastado."
    body = json.loads(captured[0].content)
    assert body["temperature"] == 0.7
    assert body["max_tokens"] == 600
    parts = body["messages"][0]["content"]
    assert parts[0] == {
        "type": "image_url",
        "image_url": {"url": "data:image/png;base64,iVBORw0KGgo="},
    }
    assert parts[1]["text"] == "Avalie o estado do banco."
    assert captured[0].headers["Authorization"] == "Bearer test-key"
    assert captured[0].headers["X-Title"] == "JM Couros"


@pytest.mark.asyncio
async def test_provider_name():
    """Provider name is correctly reported."""
    client = OpenRouterClient(api_key="test-key")
    assert client.provider_name == "openrouter"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"choices": [{"message": None}]},
    [{"choices": []}],
    {"error": "quota"},
    {"choices": ["oops"]},
    {"choices": [{"message": {"content": ["not", "text"]}}]},
    {"choices": None},
])
async def test_complete_malformed_body_raises_provider_error(body):
    """Bodies that are not shaped like a completion surface as ChatProviderError."""
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=body))
    client = OpenRouterClient(
        api_key="test-key",
        http_client=httpx.AsyncClient(transport=transport),
    )

    with pytest.raises(ChatProviderError):
        await client.complete(
            messages=[ChatMessage(role="user", content="Hi")],
            model="google/gemini-2.5-flash",
        )
