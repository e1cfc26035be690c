"""OpenRouter insight generator — concrete implementation of the InsightGenerator port.

Reuses the OpenRouterClient for API calls, adding the sales-advisor
prompt engineering for leather upholstery clients.
"""

import logging

from app.application.interfaces import ChatProvider, InsightGenerator
from app.domain.entities import ChatMessage, ClientRecord, ContentPart
from app.infrastructure.logging.colored_logger import WorkflowLogger, WorkflowStage

logger = logging.getLogger(__name__)
plog = WorkflowLogger("OpenRouterInsightGenerator")

_INSIGHT_SYSTEM_PROMPT = """You are a senior sales consultant for JM Couros, a workshop that makes custom leather upholstery for cars, motorcycles and furniture.

Given one client's record, write a short commercial insight for the workshop owner.

IMPORTANT RULES:
1. Reply in {language}, in plain text (no markdown headings, no JSON)
2. At most 5 short bullet points or 120 words
3. Cover: likely project scope, a suggested leather/finish upsell that fits the budget, and the best next contact step (WhatsApp, call or e-mail)
4. Base every suggestion on the record; if information is missing, say what to ask the client
5. If a photo is attached, use it to judge the current condition of the piece"""

_FIELD_LABELS: tuple[tuple[str, str], ...] = (
    ("name", "Name"),
    ("phone", "Phone"),
    ("whatsapp_handle", "WhatsApp"),
    ("email", "E-mail"),
    ("address", "Address"),
    ("budget_label", "Budget"),
    ("technical_notes", "Technical notes"),
)


class OpenRouterInsightGenerator(InsightGenerator):
    """Concrete insight generator using the OpenRouter API."""

    def __init__(
        self,
        chat_provider: ChatProvider,
        model: str,
        *,
        temperature: float = 0.7,
        max_tokens: int = 600,
        language: str = "Brazilian Portuguese",
    ):
        self._provider = chat_provider
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._language = language

    async def generate_insight(self, record: ClientRecord) -> str:
        """Send the record (and its photo, if any) to the LLM and return the advice text."""
        messages = self.build_messages(record)

        plog.detail(
            "Sending client record to LLM",
            model=self._model,
            multimodal=record.has_image,
        )

        result = await self._provider.complete(
            messages,
            self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )

        plog.step_complete(
            WorkflowStage.ENRICHMENT,
            "LLM insight received",
            tokens=result.usage.total_tokens,
            finish_reason=result.finish_reason,
        )
        return result.content.strip()

    def build_messages(self, record: ClientRecord) -> list[ChatMessage]:
        system = ChatMessage(
            role="system",
            content=_INSIGHT_SYSTEM_PROMPT.format(language=self._language),
        )
        user_text = (
            "## Client record\n"
            f"{self._describe(record)}\n\n"
            "Write the commercial insight for this client."
        )

        if not record.has_image:
            return [system, ChatMessage(role="user", content=user_text)]

        return [
            system,
            ChatMessage(
                role="user",
                content=[
                    ContentPart(type="image_url", image_url={"url": record.image_data}),
                    ContentPart(type="text", text=user_text),
                ],
            ),
        ]

    # ── Helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _describe(record: ClientRecord) -> str:
        lines = []
        for attr, label in _FIELD_LABELS:
            value = getattr(record, attr).strip()
            lines.append(f"- {label}: {value or '(not informed)'}")
        lines.append(f"- Client since: {record.created_at.date().isoformat()}")
        return "\n".join(lines)
