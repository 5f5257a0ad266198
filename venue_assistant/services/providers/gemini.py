from typing import Any

from venue_assistant.core.config import Settings, settings
from venue_assistant.services.providers.base import AnswerProvider, ProviderRequest
from venue_assistant.services.providers.prompts import build_secondary_prompt

# model ack that keeps user/model turns alternating after the grounding prompt
PRIMING_REPLY = "I'll help you with that!"


class GeminiProvider(AnswerProvider):
    """generateContent: a single grounding prompt followed by the recent turns."""
    name = "secondary"
    label = "Gemini"
    max_chunks = settings.SECONDARY_MAX_CHUNKS

    def __init__(self, *args, model: str | None = None, base_url: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.model = model or settings.GEMINI_MODEL
        self.base_url = (base_url or settings.GEMINI_BASE_URL).rstrip("/")

    def _key_from(self, cfg: Settings) -> str:
        return cfg.GEMINI_API_KEY

    def build_contents(self, request: ProviderRequest) -> list[dict[str, Any]]:
        prompt = build_secondary_prompt(
            request.user_message, request.retrieval.context, request.history_summary
        )
        if not request.recent_history:
            return [{"role": "user", "parts": [{"text": prompt}]}]

        return [
            {"role": "user", "parts": [{"text": prompt}]},
            {"role": "model", "parts": [{"text": PRIMING_REPLY}]},
            *(
                {"role": "user" if m.role == "user" else "model", "parts": [{"text": m.content}]}
                for m in request.recent_history
            ),
            {"role": "user", "parts": [{"text": request.user_message}]},
        ]

    def build_request(self, request: ProviderRequest, api_key: str) -> dict[str, Any]:
        return {
            "url": f"{self.base_url}/models/{self.model}:generateContent",
            "params": {"key": api_key},
            "headers": {"Content-Type": "application/json"},
            "json": {
                "contents": self.build_contents(request),
                "generationConfig": {
                    "temperature": settings.LLM_TEMPERATURE,
                    "maxOutputTokens": settings.LLM_MAX_TOKENS,
                },
            },
        }

    def extract_text(self, data: Any) -> str | None:
        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return None
