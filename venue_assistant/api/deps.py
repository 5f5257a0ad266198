from venue_assistant.services.knowledge.store import KnowledgeStore, get_knowledge_store
from venue_assistant.services.rag import AnswerService, get_answer_service


def get_assistant() -> AnswerService:
    return get_answer_service()


def get_store() -> KnowledgeStore:
    return get_knowledge_store()
