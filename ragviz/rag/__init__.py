"""RAG (Retrieval-Augmented Generation) pipeline components.

This package contains modules for:
- Vector math and mock embeddings
- Overlap detection between chunks
- Text chunking with five strategies
- Similarity ranking
- Mock response synthesis
"""
from ragviz.rag.chunker import Chunk, ChunkOptions, StrategyId, TextChunker, chunk
from ragviz.rag.overlap import Overlap, find_overlap
from ragviz.rag.responder import synthesize
from ragviz.rag.retriever import Query, ScoredChunk, SimilarityRanker, rank
from ragviz.rag.vectors import (
    RandomVectorSource,
    VectorSource,
    cosine_similarity,
    generate_vector,
)

__all__ = [
    "Chunk",
    "ChunkOptions",
    "Overlap",
    "Query",
    "RandomVectorSource",
    "ScoredChunk",
    "SimilarityRanker",
    "StrategyId",
    "TextChunker",
    "VectorSource",
    "chunk",
    "cosine_similarity",
    "find_overlap",
    "generate_vector",
    "rank",
    "synthesize",
]
