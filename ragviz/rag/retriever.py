"""Similarity ranking of chunks against a query.

Handles:
- Query embedding through the shared VectorSource
- Cosine similarity scoring per chunk
- Stable descending ordering and top-K truncation
"""
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import structlog

from ragviz import config
from ragviz.rag.chunker import Chunk
from ragviz.rag.vectors import RandomVectorSource, VectorSource, cosine_similarity

logger = structlog.get_logger()


@dataclass(frozen=True)
class Query:
    """A query string and its vector, valid for one ranking cycle."""

    text: str
    vector: Tuple[float, ...]


@dataclass(frozen=True)
class ScoredChunk:
    """A chunk paired with its similarity to a query."""

    chunk: Chunk
    similarity: float
    rank: int = 0

    @property
    def similarity_percent(self) -> int:
        """Similarity as a whole percentage for display."""
        return round(self.similarity * 100)


def rank(
    query_vector: Sequence[float],
    chunks: Sequence[Chunk],
    top_k: Optional[int] = None,
) -> List[ScoredChunk]:
    """Score chunks against a query vector and order them best first.

    Chunks without a vector, with a different dimension than the query, or
    whose similarity is undefined (zero vector) are skipped. Equal scores
    keep their input order.

    Args:
        query_vector: Query embedding
        chunks: Candidate chunks
        top_k: Maximum number of results (None = all)

    Returns:
        List of ScoredChunk objects, highest similarity first
    """
    if top_k is not None and top_k <= 0:
        return []

    dimension = len(query_vector)
    scored = []
    skipped = 0

    for candidate in chunks:
        if candidate.vector is None or len(candidate.vector) != dimension:
            skipped += 1
            continue

        similarity = cosine_similarity(query_vector, candidate.vector)
        if math.isnan(similarity):
            skipped += 1
            continue

        scored.append((candidate, similarity))

    # list.sort is stable, reverse=True included
    scored.sort(key=lambda pair: pair[1], reverse=True)

    if top_k is not None:
        scored = scored[:top_k]

    results = [
        ScoredChunk(chunk=candidate, similarity=similarity, rank=position)
        for position, (candidate, similarity) in enumerate(scored, 1)
    ]

    if skipped:
        logger.debug("chunks_skipped_during_ranking", skipped=skipped, dimension=dimension)

    logger.debug(
        "chunks_ranked",
        candidates=len(chunks),
        results_returned=len(results),
        top_similarity=results[0].similarity if results else None,
    )

    return results


class SimilarityRanker:
    """Embeds queries and ranks chunks against them."""

    def __init__(self, vector_source: Optional[VectorSource] = None, top_k: int = None):
        """Initialize the ranker.

        Args:
            vector_source: Embedder for queries (random placeholder by default)
            top_k: Number of results to retrieve (default from config)

        Raises:
            ValueError: If top_k is less than 1
        """
        self.vector_source = vector_source or RandomVectorSource()
        self.top_k = config.RETRIEVAL_TOP_K if top_k is None else top_k

        if self.top_k < 1:
            raise ValueError(f"top_k must be at least 1, got {self.top_k}")

        logger.info(
            "ranker_initialized",
            dimension=self.vector_source.dimension,
            top_k=self.top_k,
        )

    def embed_query(self, text: str) -> Query:
        """Build a Query with a freshly generated vector."""
        return Query(text=text, vector=tuple(self.vector_source.embed(text)))

    def retrieve(
        self,
        query: str,
        chunks: Sequence[Chunk],
        top_k: Optional[int] = None,
    ) -> List[ScoredChunk]:
        """Embed the query and return the top-K most similar chunks.

        Args:
            query: User query text
            chunks: Candidate chunks
            top_k: Number of results to return (overrides default)

        Returns:
            List of ScoredChunk objects, best first
        """
        if not query or not query.strip():
            logger.warning("empty_query_provided")
            return []

        top_k = self.top_k if top_k is None else top_k
        results = rank(self.embed_query(query).vector, chunks, top_k)

        logger.info(
            "retrieval_completed",
            query_length=len(query),
            results_returned=len(results),
            top_similarity=results[0].similarity if results else None,
        )

        return results
