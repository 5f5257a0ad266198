import json
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator

import structlog

from venue_assistant.core.config import settings

logger = structlog.get_logger(__name__)

DEFAULT_KNOWLEDGE_BASE = Path(__file__).parent / "data" / "knowledge_base.jsonl"


@dataclass(frozen=True)
class KnowledgeChunk:
    id: str
    category: str
    keywords: tuple[str, ...]
    title: str
    content: str


def _load_jsonl(path: Path) -> list[dict]:
    rows: list[dict] = []
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                rows.append(json.loads(line))
    return rows


def chunk_from_row(row: dict) -> KnowledgeChunk:
    keywords = tuple(k for k in (row.get("keywords") or []) if k)
    if not keywords:
        raise ValueError(f"knowledge chunk {row.get('id')!r} has no keywords")
    return KnowledgeChunk(
        id=row["id"],
        category=row["category"],
        keywords=keywords,
        title=row["title"],
        content=row["content"],
    )


class KnowledgeStore:
    """
    Read-only corpus of knowledge chunks.
      - chunks: corpus order, which is also the tie-break order for ranking
      - get(id): O(1) lookup through a read-only index
    Never mutated after construction; see reload_knowledge_store() for updates.
    """
    def __init__(self, chunks: Iterable[KnowledgeChunk]):
        self._chunks = tuple(chunks)
        index: dict[str, KnowledgeChunk] = {}
        for chunk in self._chunks:
            if chunk.id in index:
                raise ValueError(f"duplicate knowledge chunk id: {chunk.id}")
            index[chunk.id] = chunk
        self._by_id = MappingProxyType(index)

    @classmethod
    def from_jsonl(cls, path: str | Path) -> "KnowledgeStore":
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Knowledge base not found: {p}")
        return cls(chunk_from_row(row) for row in _load_jsonl(p))

    @property
    def chunks(self) -> tuple[KnowledgeChunk, ...]:
        return self._chunks

    def get(self, chunk_id: str) -> KnowledgeChunk | None:
        return self._by_id.get(chunk_id)

    def __len__(self) -> int:
        return len(self._chunks)

    def __iter__(self) -> Iterator[KnowledgeChunk]:
        return iter(self._chunks)


_store: KnowledgeStore | None = None


def _default_path() -> Path:
    return Path(settings.KNOWLEDGE_BASE_PATH) if settings.KNOWLEDGE_BASE_PATH else DEFAULT_KNOWLEDGE_BASE


def get_knowledge_store() -> KnowledgeStore:
    global _store
    if _store is None:
        _store = reload_knowledge_store()
    return _store


def reload_knowledge_store(path: str | Path | None = None) -> KnowledgeStore:
    """Build a fresh store and swap it in; readers holding the old one keep a consistent view."""
    global _store
    source = Path(path) if path else _default_path()
    store = KnowledgeStore.from_jsonl(source)
    _store = store
    logger.info("knowledge.loaded", path=str(source), chunks=len(store))
    return store
