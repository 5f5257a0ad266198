"""Shared fixtures: the packaged knowledge store, synthetic stores, and a retry
policy whose sleeps are recorded instead of slept."""

from __future__ import annotations

import pytest

from venue_assistant.services.knowledge.store import KnowledgeChunk, KnowledgeStore, get_knowledge_store
from venue_assistant.services.providers.retry import RetryPolicy

API_KEY = "k" * 32


def make_chunk(
    chunk_id: str,
    keywords: tuple[str, ...] = ("zzz",),
    title: str = "Zed",
    content: str = "nothing here",
    category: str = "misc",
) -> KnowledgeChunk:
    return KnowledgeChunk(id=chunk_id, category=category, keywords=keywords, title=title, content=content)


@pytest.fixture(scope="session")
def store() -> KnowledgeStore:
    return get_knowledge_store()


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def retry_policy(sleeps) -> RetryPolicy:
    return RetryPolicy(max_attempts=3, rate_limit_backoff=2.0, failure_backoff=1.0, sleep=sleeps.append)


@pytest.fixture(autouse=True)
def _no_provider_keys(monkeypatch):
    # never let a developer's real keys reach a provider under test
    monkeypatch.setenv("GROQ_API_KEY", "")
    monkeypatch.setenv("GEMINI_API_KEY", "")
