import threading
from functools import lru_cache, partial
from typing import Sequence

import structlog

from venue_assistant.core.errors import ConfigurationError, ProviderExhausted, RequestCancelled
from venue_assistant.schemas.chat import AIResponse, ChatMessage
from venue_assistant.services.history import recent_history, summarize_history
from venue_assistant.services.knowledge.store import KnowledgeStore
from venue_assistant.services.providers.base import AnswerProvider, ProviderRequest
from venue_assistant.services.providers.gemini import GeminiProvider
from venue_assistant.services.providers.groq import GroqProvider
from venue_assistant.services.providers.retry import RetryPolicy
from venue_assistant.services.retrieval.ranker import retrieve_knowledge
from venue_assistant.services.synthesizer import LocalSynthesizer
from venue_assistant.utils.suggestions import extract_suggestions

logger = structlog.get_logger(__name__)


def default_providers() -> list[AnswerProvider]:
    return [GroqProvider(), GeminiProvider()]


class AnswerService:
    """
    Provider chain: each remote provider in order (with retries), then the local
    synthesizer, which cannot fail. Stateless between calls.
    """
    def __init__(
        self,
        providers: Sequence[AnswerProvider] | None = None,
        retry_policy: RetryPolicy | None = None,
        synthesizer: LocalSynthesizer | None = None,
        store: KnowledgeStore | None = None,
    ):
        self.providers = list(providers) if providers is not None else default_providers()
        self.retry_policy = retry_policy or RetryPolicy.from_settings()
        self.store = store
        self.synthesizer = synthesizer or LocalSynthesizer(store=store)

    def generate_answer(
        self,
        user_message: str,
        history: Sequence[ChatMessage] = (),
        cancel: threading.Event | None = None,
    ) -> AIResponse:
        history = list(history)
        logger.info("assistant.request", chars=len(user_message), history=len(history))

        max_chunks = max(
            [p.max_chunks for p in self.providers] + [self.synthesizer.max_chunks]
        )
        retrieval = retrieve_knowledge(user_message, max_chunks=max_chunks, store=self.store)
        logger.info("assistant.retrieved", intent=retrieval.intent, chunks=len(retrieval.chunks))

        summary = summarize_history(history)
        recent = recent_history(history)

        for provider in self.providers:
            _raise_if_cancelled(cancel)
            request = ProviderRequest(
                user_message=user_message,
                retrieval=retrieval.top(provider.max_chunks),
                recent_history=recent,
                history_summary=summary,
            )
            try:
                text = self.retry_policy.run(
                    partial(provider.generate, request), label=provider.label, cancel=cancel
                )
            except ConfigurationError as exc:
                logger.warning("provider.unconfigured", provider=provider.label, error=str(exc))
                continue
            except ProviderExhausted as exc:
                logger.warning("provider.skipped", provider=provider.label, error=exc.last_reason)
                continue

            suggestions = extract_suggestions(text)
            return AIResponse(
                success=True,
                message=text,
                provider=provider.name,
                suggestions=suggestions or None,
            )

        _raise_if_cancelled(cancel)
        logger.info("assistant.fallback", intent=retrieval.intent)
        return self.synthesizer.synthesize(user_message, retrieval.top(self.synthesizer.max_chunks))

    def provider_status(self) -> dict[str, bool]:
        return {p.name: p.is_configured() for p in self.providers}


def _raise_if_cancelled(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise RequestCancelled("request cancelled by caller")


@lru_cache
def get_answer_service() -> AnswerService:
    return AnswerService()


def generate_answer(user_message: str, history: Sequence[ChatMessage] = ()) -> AIResponse:
    return get_answer_service().generate_answer(user_message, history)
