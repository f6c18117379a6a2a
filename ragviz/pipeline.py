"""End-to-end RAG session: chunk a document, rank chunks, answer queries.

Orchestrates:
- Chunking with the selected strategy
- Query embedding and similarity ranking
- Mock response synthesis
- Conversation history
"""
from typing import List, Optional, Sequence, Union
import numpy as np
import structlog

from ragviz import config
from ragviz.memory import ConversationEntry, ConversationHistory
from ragviz.rag.chunker import (
    Chunk,
    ChunkOptionsLike,
    StrategyId,
    TextChunker,
    get_chunk_stats,
)
from ragviz.rag.responder import synthesize
from ragviz.rag.retriever import ScoredChunk, SimilarityRanker
from ragviz.rag.vectors import RandomVectorSource, VectorSource, make_rng

logger = structlog.get_logger()


class RagSession:
    """One visualizer session over a single document."""

    def __init__(
        self,
        strategy: Union[str, StrategyId] = None,
        options: ChunkOptionsLike = None,
        vector_source: Optional[VectorSource] = None,
        rng: Optional[np.random.Generator] = None,
        top_k: int = None,
    ):
        """Initialize the session.

        Args:
            strategy: Chunking strategy (default from config)
            options: Chunk options (defaults from config)
            vector_source: Embedder shared by chunks and queries
            rng: Randomness source (default from make_rng)
            top_k: Chunks used per response (default from config)
        """
        self.strategy = StrategyId.parse(strategy or config.DEFAULT_STRATEGY)
        self.rng = rng if rng is not None else make_rng()
        self.vector_source = vector_source or RandomVectorSource(rng=self.rng)

        self.chunker = TextChunker(options, vector_source=self.vector_source, rng=self.rng)
        self.ranker = SimilarityRanker(self.vector_source, top_k=top_k)
        self.history = ConversationHistory()

        self.chunks: List[Chunk] = []

        logger.info(
            "rag_session_initialized",
            strategy=self.strategy.value,
            top_k=self.ranker.top_k,
        )

    def load_text(
        self,
        text: str,
        strategy: Union[str, StrategyId] = None,
        options: ChunkOptionsLike = None,
    ) -> List[Chunk]:
        """Chunk a document, replacing any previous chunks and their vectors.

        Args:
            text: Document text
            strategy: Override the session strategy for this and later loads
            options: Per-call chunk options

        Returns:
            The new list of chunks
        """
        if strategy is not None:
            self.strategy = StrategyId.parse(strategy)

        self.chunks = self.chunker.chunk_text(text, self.strategy, options)
        return self.chunks

    @property
    def stats(self) -> dict:
        return get_chunk_stats(self.chunks, self.strategy)

    def similarities(self, query: str, top_k: Optional[int] = None) -> List[ScoredChunk]:
        """Rank the loaded chunks against a fresh query vector.

        Args:
            query: User query text
            top_k: Number of results (default config.SIMILARITY_TOP_K)
        """
        top_k = config.SIMILARITY_TOP_K if top_k is None else top_k
        return self.ranker.retrieve(query, self.chunks, top_k)

    def ask(
        self,
        query: str,
        ranked: Optional[Sequence[ScoredChunk]] = None,
    ) -> ConversationEntry:
        """Answer a query from the loaded chunks and record it.

        Args:
            query: User query text
            ranked: A ranking already computed for this query (for example
                the one shown by similarities); the response uses its first
                top_k entries instead of embedding the query again

        Returns:
            The ConversationEntry appended to the history

        Raises:
            ValueError: If the query is blank or nothing could be retrieved
        """
        if not query or not query.strip():
            raise ValueError("Query must not be empty")

        if not self.chunks:
            raise ValueError("No chunks loaded; call load_text first")

        if ranked is None:
            top_chunks = self.ranker.retrieve(query, self.chunks)
        else:
            top_chunks = list(ranked[: self.ranker.top_k])

        if not top_chunks:
            raise ValueError("No chunk has a vector comparable to the query")

        response = synthesize(query, top_chunks)
        entry = self.history.add_entry(query, response, top_chunks)

        logger.info(
            "query_answered",
            query_length=len(query),
            chunks_used=len(top_chunks),
            history_length=len(self.history),
        )

        return entry
