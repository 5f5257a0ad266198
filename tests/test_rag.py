import threading

import pytest

from venue_assistant.core.errors import RateLimited, RequestCancelled, TransientProviderError
from venue_assistant.schemas.chat import ChatMessage
from venue_assistant.services import rag
from venue_assistant.services.providers.gemini import GeminiProvider
from venue_assistant.services.providers.groq import GroqProvider
from venue_assistant.services.rag import AnswerService

from conftest import API_KEY
from fakes import FakeResponse, FakeSession, RecordingProvider, gemini_ok, groq_ok


def _service(store, retry_policy, groq_session, gemini_session, groq_key=API_KEY, gemini_key=API_KEY):
    return AnswerService(
        providers=[
            GroqProvider(api_key=groq_key, session=groq_session),
            GeminiProvider(api_key=gemini_key, session=gemini_session),
        ],
        retry_policy=retry_policy,
        store=store,
    )


def test_primary_answers(store, retry_policy):
    groq, gemini = FakeSession(groq_ok("Go to `/venues`.")), FakeSession(gemini_ok("unused"))
    response = _service(store, retry_policy, groq, gemini).generate_answer("how do I book a venue")

    assert response.provider == "primary"
    assert response.message == "Go to `/venues`."
    assert response.suggestions is None
    assert len(groq.calls) == 1
    assert gemini.calls == []


def test_rate_limited_primary_falls_to_secondary(store, retry_policy, sleeps):
    groq, gemini = FakeSession(FakeResponse(429, {})), FakeSession(gemini_ok("Browse /venues"))
    response = _service(store, retry_policy, groq, gemini).generate_answer("how do I book a venue")

    assert len(groq.calls) == 3
    assert len(gemini.calls) == 1
    assert sleeps == [2.0, 4.0]
    assert response.provider == "secondary"
    assert response.message == "Browse /venues"


def test_transient_then_success_stays_on_primary(store, retry_policy, sleeps):
    groq = FakeSession(FakeResponse(500, {}), groq_ok("recovered"))
    gemini = FakeSession(gemini_ok("unused"))
    response = _service(store, retry_policy, groq, gemini).generate_answer("points")

    assert response.provider == "primary"
    assert response.message == "recovered"
    assert sleeps == [1.0]
    assert gemini.calls == []


def test_both_exhausted_uses_fallback(store, retry_policy, sleeps):
    groq, gemini = FakeSession(FakeResponse(429, {})), FakeSession(FakeResponse(500, {}))
    response = _service(store, retry_policy, groq, gemini).generate_answer("how do I book a venue")

    assert len(groq.calls) == 3
    assert len(gemini.calls) == 3
    assert sleeps == [2.0, 4.0, 1.0, 2.0]
    assert response.success is True
    assert response.provider == "fallback"
    assert "/venues" in response.message


def test_unconfigured_providers_are_skipped(store, retry_policy, sleeps):
    groq, gemini = FakeSession(groq_ok("x")), FakeSession(gemini_ok("x"))
    service = _service(store, retry_policy, groq, gemini, groq_key="", gemini_key="too-short")
    response = service.generate_answer("I lost my points")

    assert groq.calls == []
    assert gemini.calls == []
    assert sleeps == []
    assert response.provider == "fallback"
    assert "/user/points-history" in response.message


def test_default_chain_without_keys_is_offline(store, retry_policy):
    service = AnswerService(retry_policy=retry_policy, store=store)
    response = service.generate_answer("how do I book a venue")
    assert response.provider == "fallback"
    assert service.provider_status() == {"primary": False, "secondary": False}


def test_suggestions_extracted(store, retry_policy):
    text = "Book at `/venues`.\n\nWould you like to know about:\n- Points\n- Tickets"
    service = _service(store, retry_policy, FakeSession(groq_ok(text)), FakeSession(gemini_ok("x")))
    response = service.generate_answer("how do I book a venue")
    assert response.suggestions == ["Points", "Tickets"]


def test_each_provider_gets_its_chunk_budget(store, retry_policy):
    primary = RecordingProvider("primary", "Groq", max_chunks=7, outcomes=[TransientProviderError("Groq", "down")])
    secondary = RecordingProvider("secondary", "Gemini", max_chunks=5, outcomes=["answer"])
    service = AnswerService(providers=[primary, secondary], retry_policy=retry_policy, store=store)

    service.generate_answer("how do I book a venue")

    assert len(primary.requests[0].retrieval.chunks) == 7
    assert len(secondary.requests[0].retrieval.chunks) == 5
    assert primary.requests[0].retrieval.chunks[:5] == secondary.requests[0].retrieval.chunks


def test_history_is_split_for_providers(store, retry_policy):
    provider = RecordingProvider("primary", "Groq")
    history = [
        ChatMessage(role="user" if i % 2 == 0 else "assistant", content=f"turn {i}") for i in range(10)
    ]
    AnswerService(providers=[provider], retry_policy=retry_policy, store=store).generate_answer("next", history)

    request = provider.requests[0]
    assert request.recent_history == history[4:]
    assert "user: turn 0..." in request.history_summary
    assert "turn 4" not in request.history_summary


def test_cancelled_request_never_falls_through(store, retry_policy):
    cancel = threading.Event()
    cancel.set()
    provider = RecordingProvider("primary", "Groq")
    service = AnswerService(providers=[provider], retry_policy=retry_policy, store=store)

    with pytest.raises(RequestCancelled):
        service.generate_answer("how do I book a venue", cancel=cancel)
    assert provider.requests == []


def test_cancel_during_backoff_stops_the_chain(store, retry_policy):
    cancel = threading.Event()
    primary = RecordingProvider("primary", "Groq", outcomes=[RateLimited("Groq")], on_call=cancel.set)
    secondary = RecordingProvider("secondary", "Gemini")
    service = AnswerService(providers=[primary, secondary], retry_policy=retry_policy, store=store)

    with pytest.raises(RequestCancelled):
        service.generate_answer("how do I book a venue", cancel=cancel)
    assert len(primary.requests) == 1
    assert secondary.requests == []


def test_module_level_generate_answer(monkeypatch, store, retry_policy):
    service = AnswerService(providers=[RecordingProvider("primary", "Groq", outcomes=["hi there"])],
                            retry_policy=retry_policy, store=store)
    monkeypatch.setattr(rag, "get_answer_service", lambda: service)

    response = rag.generate_answer("hello")
    assert response.provider == "primary"
    assert response.message == "hi there"
