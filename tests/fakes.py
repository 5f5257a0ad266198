"""Test doubles for provider HTTP traffic and the provider chain."""

from __future__ import annotations

from typing import Any

from venue_assistant.schemas.chat import AIResponse

_INVALID_JSON = object()


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, invalid_json: bool = False):
        self.status_code = status_code
        self._body = _INVALID_JSON if invalid_json else body

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if self._body is _INVALID_JSON:
            raise ValueError("not json")
        return self._body


class FakeSession:
    """Replays responses in order; the last one repeats. Exceptions are raised."""

    def __init__(self, *responses: Any):
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def post(self, **kwargs: Any) -> FakeResponse:
        self.calls.append(kwargs)
        outcome = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingProvider:
    """Duck-typed AnswerProvider that replays outcomes and records requests."""

    def __init__(self, name: str, label: str, max_chunks: int = 5, outcomes: list | None = None, on_call=None):
        self.name = name
        self.label = label
        self.max_chunks = max_chunks
        self.outcomes = list(outcomes or ["ok"])
        self.requests: list = []
        self.on_call = on_call

    def generate(self, request) -> str:
        self.requests.append(request)
        if self.on_call:
            self.on_call()
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def is_configured(self) -> bool:
        return True


class StubAssistant:
    def __init__(self, response: AIResponse | None = None, error: Exception | None = None):
        self.response = response or AIResponse(message="stub answer", provider="primary")
        self.error = error
        self.calls: list[tuple] = []

    def generate_answer(self, user_message, history=(), cancel=None) -> AIResponse:
        self.calls.append((user_message, list(history), cancel))
        if self.error:
            raise self.error
        return self.response

    def provider_status(self) -> dict[str, bool]:
        return {"primary": True, "secondary": False}


def groq_ok(text: str) -> FakeResponse:
    return FakeResponse(200, {"choices": [{"message": {"role": "assistant", "content": text}}]})


def gemini_ok(text: str) -> FakeResponse:
    return FakeResponse(200, {"candidates": [{"content": {"parts": [{"text": text}]}}]})
