import os
import sys

from venue_assistant.services.knowledge.store import reload_knowledge_store
from venue_assistant.services.rag import AnswerService
from venue_assistant.services.retrieval.expansion import expand_query
from venue_assistant.services.retrieval.ranker import retrieve_knowledge, score_chunk

SAMPLE_QUERIES = [
    "how do I book a venue",
    "what is eventvenue",
    "where can I see my bookings",
    "I lost my points",
    "how do I become a vendor",
    "how can I buy points",
    "",
]


def show(query: str, k: int, store) -> None:
    result = retrieve_knowledge(query, max_chunks=k, store=store)
    expanded = expand_query(query)

    print(f"\nquery: {query!r}")
    print(f"intent: {result.intent}  boosts: {', '.join(result.boost_categories) or '-'}")
    print(f"expanded: {', '.join(sorted(expanded)) or '-'}")
    for rank, chunk in enumerate(result.chunks, start=1):
        score = score_chunk(query, chunk, expanded, result.boost_categories)
        print(f"  {rank}. {chunk.id:<28} {score:>7.1f}  [{chunk.category}] {chunk.title}")


def main():
    # KB_PATH: alternate knowledge_base.jsonl; TOP_K: chunks per query
    # SYNTH=1 also prints the offline answer for each query
    store = reload_knowledge_store(os.environ.get("KB_PATH") or None)
    k = int(os.environ.get("TOP_K", "5"))
    queries = sys.argv[1:] or SAMPLE_QUERIES

    print(f"Loaded {len(store)} chunks")
    synth = AnswerService(providers=[], store=store) if os.environ.get("SYNTH") == "1" else None

    for q in queries:
        show(q, k, store)
        if synth:
            print("  ---")
            print("  " + synth.generate_answer(q).message.replace("\n", "\n  "))


if __name__ == "__main__":
    main()
