"""OpenRouter API client — implements the ChatProvider interface.

Communicates with the OpenRouter API (https://openrouter.ai/api/v1)
using httpx for non-streaming chat completions.
"""

import json
import logging

import httpx

from app.application.interfaces.chat_provider import ChatProvider
from app.domain.entities import (
    ChatMessage,
    ChatCompletionResult,
    TokenUsage,
)
from app.domain.exceptions import ChatProviderError

logger = logging.getLogger(__name__)


class OpenRouterClient(ChatProvider):
    """Infrastructure adapter — connects to the OpenRouter API.

    Uses an injected httpx.AsyncClient when given (connection pooling,
    tests), otherwise opens a short-lived client per request.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://openrouter.ai/api/v1",
        app_name: str = "JM Couros",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 60.0,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._app_name = app_name
        self._http_client = http_client
        self._timeout = timeout

    @property
    def provider_name(self) -> str:
        return "openrouter"

    def _get_headers(self) -> dict[str, str]:
        """Standard headers for OpenRouter requests."""
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "X-Title": self._app_name,
        }

    def _build_payload(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> dict:
        """Build the request payload for the OpenRouter API."""
        payload: dict = {
            "model": model,
            "messages": [self._serialize_message(m) for m in messages],
        }
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        return payload

    @staticmethod
    def _serialize_message(msg: ChatMessage) -> dict:
        """Convert a domain ChatMessage to an API-compatible dict."""
        if isinstance(msg.content, str):
            return {"role": msg.role, "content": msg.content}

        # Multimodal content
        parts = []
        for part in msg.content:
            if part.type == "text":
                parts.append({"type": "text", "text": part.text or ""})
            elif part.type == "image_url" and part.image_url:
                parts.append({
                    "type": "image_url",
                    "image_url": part.image_url,
                })
        return {"role": msg.role, "content": parts}

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def complete(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> ChatCompletionResult:
        """Send a non-streaming chat completion to OpenRouter."""
        payload = self._build_payload(
            messages, model, temperature=temperature, max_tokens=max_tokens
        )
        url = f"{self._base_url}/chat/completions"

        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await client.post(
                url, headers=self._get_headers(), json=payload
            )

            if response.status_code != 200:
                self._raise_provider_error(response)

            try:
                data = response.json()
            except json.JSONDecodeError:
                raise ChatProviderError(
                    provider=self.provider_name,
                    status_code=response.status_code,
                    message="Response body is not valid JSON",
                )
            return self._parse_completion_response(data)

        finally:
            if should_close:
                await client.aclose()

    def _parse_completion_response(self, data: object) -> ChatCompletionResult:
        """Parse the OpenRouter JSON response into a domain entity.

        Raises:
            ChatProviderError: The body reports an error or does not have
                the shape of a chat completion.
        """
        if not isinstance(data, dict):
            raise self._malformed("response body is not a JSON object")

        # Check for error in response body
        if "error" in data:
            error = data["error"]
            if not isinstance(error, dict):
                raise ChatProviderError(
                    provider=self.provider_name,
                    status_code=500,
                    message=str(error),
                )
            code = error.get("code", 500)
            raise ChatProviderError(
                provider=self.provider_name,
                status_code=code if isinstance(code, int) else 500,
                message=str(error.get("message", "Unknown error")),
            )

        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            raise self._malformed("No choices in response")

        choice = choices[0]
        if not isinstance(choice, dict):
            raise self._malformed("choice is not an object")
        message = choice.get("message")
        if not isinstance(message, dict):
            raise self._malformed("choice has no message")
        content = message.get("content")
        if content is not None and not isinstance(content, str):
            raise self._malformed("message content is not text")

        usage_data = data.get("usage")
        if not isinstance(usage_data, dict):
            usage_data = {}

        return ChatCompletionResult(
            model=str(data.get("model") or ""),
            content=content or "",
            finish_reason=choice.get("finish_reason") or "stop",
            usage=TokenUsage(
                prompt_tokens=usage_data.get("prompt_tokens", 0),
                completion_tokens=usage_data.get("completion_tokens", 0),
                total_tokens=usage_data.get("total_tokens", 0),
                cost=usage_data.get("cost"),
            ),
            provider=self.provider_name,
        )

    def _malformed(self, message: str) -> ChatProviderError:
        return ChatProviderError(
            provider=self.provider_name,
            status_code=502,
            message=f"Malformed completion response: {message}",
        )

    def _raise_provider_error(self, response: httpx.Response) -> None:
        """Raise ChatProviderError from a non-200 httpx Response."""
        try:
            data = response.json()
            error = data.get("error", {})
            message = error.get("message", response.text)
        except (ValueError, AttributeError):
            message = response.text

        raise ChatProviderError(
            provider=self.provider_name,
            status_code=response.status_code,
            message=message,
        )
