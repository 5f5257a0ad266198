from typing import Any

from venue_assistant.core.config import Settings, settings
from venue_assistant.services.providers.base import AnswerProvider, ProviderRequest
from venue_assistant.services.providers.prompts import build_primary_system_prompt


class GroqProvider(AnswerProvider):
    """OpenAI-compatible chat completions: system prompt + recent turns + new message."""
    name = "primary"
    label = "Groq"
    max_chunks = settings.PRIMARY_MAX_CHUNKS

    def __init__(self, *args, model: str | None = None, base_url: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.model = model or settings.GROQ_MODEL
        self.base_url = (base_url or settings.GROQ_BASE_URL).rstrip("/")

    def _key_from(self, cfg: Settings) -> str:
        return cfg.GROQ_API_KEY

    def build_messages(self, request: ProviderRequest) -> list[dict[str, str]]:
        system_prompt = build_primary_system_prompt(request.retrieval.context, request.history_summary)
        return [
            {"role": "system", "content": system_prompt},
            *({"role": m.role, "content": m.content} for m in request.recent_history),
            {"role": "user", "content": request.user_message},
        ]

    def build_request(self, request: ProviderRequest, api_key: str) -> dict[str, Any]:
        return {
            "url": f"{self.base_url}/chat/completions",
            "headers": {
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
            "json": {
                "model": self.model,
                "messages": self.build_messages(request),
                "temperature": settings.LLM_TEMPERATURE,
                "max_tokens": settings.LLM_MAX_TOKENS,
            },
        }

    def extract_text(self, data: Any) -> str | None:
        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return None
