from typing import Sequence

from venue_assistant.schemas.chat import ChatMessage

RECENT_TURNS = 6
SUMMARY_WORDS = 10


def recent_history(history: Sequence[ChatMessage]) -> list[ChatMessage]:
    return list(history[-RECENT_TURNS:])


def summarize_history(history: Sequence[ChatMessage]) -> str:
    """
    Lossy note for turns older than the last RECENT_TURNS, which are always
    sent verbatim. Empty string when there is nothing older.
    """
    if len(history) <= RECENT_TURNS:
        return ""

    older = history[:-RECENT_TURNS]
    topics = "\n".join(
        f"{m.role}: {' '.join(m.content.split()[:SUMMARY_WORDS])}..." for m in older
    )
    return f"\n[Earlier in this conversation, you discussed:\n{topics}]\n"
