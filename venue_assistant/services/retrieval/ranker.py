from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from venue_assistant.services.knowledge.store import KnowledgeChunk, KnowledgeStore, get_knowledge_store
from venue_assistant.services.retrieval.expansion import expand_query
from venue_assistant.services.retrieval.intent import classify_intent

KEYWORD_PHRASE_WEIGHT = 20
KEYWORD_OVERLAP_WEIGHT = 8
TITLE_WEIGHT = 5
CONTENT_WEIGHT = 2
EXACT_QUERY_BONUS = 25
CATEGORY_BOOST = 1.5

CONTEXT_HEADER = "RELEVANT KNOWLEDGE:\n\n"
EMPTY_CONTEXT = "No specific information found."

# fallback sets when nothing scores; keyed by intent
DEFAULT_CHUNK_IDS: dict[str, tuple[str, ...]] = {
    "vendor": ("vendor-become", "vendor-dashboard"),
    "admin": ("admin-dashboard",),
    "points": ("points-what", "points-buy"),
}
GENERAL_DEFAULT_IDS = ("about-platform", "faq-how-it-works", "support-contact")


@dataclass
class RetrievalResult:
    chunks: list[KnowledgeChunk]
    context: str
    intent: str
    boost_categories: tuple[str, ...] = field(default_factory=tuple)

    def top(self, n: int) -> RetrievalResult:
        """First n chunks with a rebuilt context (same as retrieving with max_chunks=n)."""
        chunks = self.chunks[:n]
        return RetrievalResult(
            chunks=chunks,
            context=build_context(chunks),
            intent=self.intent,
            boost_categories=self.boost_categories,
        )


def score_chunk(
    query: str,
    chunk: KnowledgeChunk,
    expanded: Iterable[str],
    boost_categories: Sequence[str] = (),
) -> float:
    query_lower = query.lower().strip()
    expanded = list(expanded)
    score = 0.0

    for keyword in chunk.keywords:
        keyword_lower = keyword.lower()
        if query_lower and keyword_lower in query_lower:
            score += KEYWORD_PHRASE_WEIGHT
        for word in expanded:
            if word in keyword_lower or keyword_lower in word:
                score += KEYWORD_OVERLAP_WEIGHT

    title_lower = chunk.title.lower()
    for word in expanded:
        if len(word) > 2 and word in title_lower:
            score += TITLE_WEIGHT

    content_lower = chunk.content.lower()
    for word in expanded:
        if len(word) > 3 and word in content_lower:
            score += CONTENT_WEIGHT

    if query_lower and query_lower in content_lower:
        score += EXACT_QUERY_BONUS

    # multiplier applies to the whole sum
    if chunk.category in boost_categories:
        score *= CATEGORY_BOOST

    return score


def default_chunks(intent: str, store: KnowledgeStore) -> list[KnowledgeChunk]:
    if intent == "support":
        return [c for c in store if "support" in c.id]
    ids = DEFAULT_CHUNK_IDS.get(intent, GENERAL_DEFAULT_IDS)
    return [c for c in store if c.id in ids]


def build_context(chunks: Sequence[KnowledgeChunk]) -> str:
    if not chunks:
        return EMPTY_CONTEXT
    parts = [CONTEXT_HEADER]
    for chunk in chunks:
        parts.append(f"### {chunk.title}\n{chunk.content}\n\n")
    return "".join(parts)


def retrieve_knowledge(query: str, max_chunks: int = 5, store: KnowledgeStore | None = None) -> RetrievalResult:
    if max_chunks < 1:
        raise ValueError("max_chunks must be >= 1")
    if store is None:
        store = get_knowledge_store()

    expanded = expand_query(query)
    intent, boost_categories = classify_intent(query)

    scored = [(chunk, score_chunk(query, chunk, expanded, boost_categories)) for chunk in store]
    # stable sort: ties keep corpus order
    scored.sort(key=lambda item: item[1], reverse=True)

    chunks = [chunk for chunk, score in scored if score > 0][:max_chunks]
    if not chunks:
        chunks = default_chunks(intent, store)

    return RetrievalResult(
        chunks=chunks,
        context=build_context(chunks),
        intent=intent,
        boost_categories=boost_categories,
    )


def categories(store: KnowledgeStore | None = None) -> list[str]:
    if store is None:
        store = get_knowledge_store()
    return list(dict.fromkeys(c.category for c in store))


def chunks_by_category(category: str, store: KnowledgeStore | None = None) -> list[KnowledgeChunk]:
    if store is None:
        store = get_knowledge_store()
    return [c for c in store if c.category == category]
