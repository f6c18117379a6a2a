"""Conversation history for a RAG visualizer session.

Keeps an append-only, in-memory record of queries, their mock responses
and the chunks retrieved for them. Nothing is persisted across restarts.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterator, List, Optional, Tuple
import structlog

from ragviz.rag.retriever import ScoredChunk

logger = structlog.get_logger()


@dataclass(frozen=True)
class ConversationEntry:
    """One query, its synthesized response and the chunks behind it."""

    query: str
    response: str
    chunks: Tuple[ScoredChunk, ...]
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def sources(self) -> List[str]:
        """Ids of the retrieved chunks, best first."""
        return [scored.chunk.id for scored in self.chunks]


class ConversationHistory:
    """Append-only sequence of conversation entries for one session."""

    def __init__(self):
        self._entries: List[ConversationEntry] = []

    def add_entry(
        self,
        query: str,
        response: str,
        chunks: List[ScoredChunk],
    ) -> ConversationEntry:
        """Record a completed query/response cycle.

        Args:
            query: The user query
            response: The synthesized response
            chunks: Top-K scored chunks used for the response

        Returns:
            The appended ConversationEntry
        """
        entry = ConversationEntry(query=query, response=response, chunks=tuple(chunks))
        self._entries.append(entry)
        logger.info(
            "conversation_entry_added",
            entry_index=len(self._entries) - 1,
            sources=entry.sources,
        )
        return entry

    @property
    def entries(self) -> Tuple[ConversationEntry, ...]:
        """All entries in chronological order."""
        return tuple(self._entries)

    def recent(self, limit: Optional[int] = None) -> List[ConversationEntry]:
        """Get the most recent entries, oldest first.

        Args:
            limit: Maximum number of entries (None = all)
        """
        if limit is None:
            return list(self._entries)
        if limit <= 0:
            return []
        return self._entries[-limit:]

    def clear(self) -> None:
        """Drop all entries, starting a new session."""
        count = len(self._entries)
        self._entries = []
        logger.info("conversation_history_cleared", entries_dropped=count)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ConversationEntry]:
        return iter(tuple(self._entries))
