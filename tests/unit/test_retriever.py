"""Tests for similarity ranking."""
import pytest

from ragviz.rag.chunker import Chunk
from ragviz.rag.retriever import ScoredChunk, SimilarityRanker, rank
from ragviz.rag.vectors import RandomVectorSource, VectorSource, generate_vector


class FixedVectorSource(VectorSource):
    """Always returns the same query vector."""

    dimension = 3

    def __init__(self, vector):
        self.vector = vector

    def embed(self, text):
        return list(self.vector)


def test_rank_scenario(make_chunk):
    """Query [1,0,0] ranks the aligned chunk first and the orthogonal one last."""
    chunks = [
        make_chunk(0, [1, 0, 0]),
        make_chunk(1, [0, 1, 0]),
        make_chunk(2, [0.9, 0.1, 0]),
    ]
    results = rank([1, 0, 0], chunks)

    assert [r.chunk.id for r in results] == ["chunk-0", "chunk-2", "chunk-1"]
    assert results[0].similarity == pytest.approx(1.0)
    assert results[1].similarity == pytest.approx(0.994, abs=1e-3)
    assert results[2].similarity == pytest.approx(0.0)
    assert [r.rank for r in results] == [1, 2, 3]


def test_rank_is_sorted_non_increasing(make_chunk, rng):
    chunks = [make_chunk(i, generate_vector(3, rng)) for i in range(50)]
    results = rank(generate_vector(3, rng), chunks)

    similarities = [r.similarity for r in results]
    assert len(results) == 50
    assert similarities == sorted(similarities, reverse=True)


def test_rank_is_stable_for_ties(make_chunk):
    """Equal scores keep their input order."""
    chunks = [
        make_chunk(0, [0, 1, 0]),
        make_chunk(1, [1, 1, 0]),
        make_chunk(2, [2, 0, 0]),
        make_chunk(3, [2, 2, 0]),
        make_chunk(4, [3, 0, 0]),
    ]
    results = rank([1, 0, 0], chunks)

    assert [r.chunk.id for r in results] == [
        "chunk-2", "chunk-4", "chunk-1", "chunk-3", "chunk-0"
    ]


def test_rank_top_k(make_chunk, rng):
    chunks = [make_chunk(i, generate_vector(3, rng)) for i in range(10)]
    query = generate_vector(3, rng)

    top = rank(query, chunks, top_k=3)
    full = rank(query, chunks)

    assert len(top) == 3
    assert [r.chunk.id for r in top] == [r.chunk.id for r in full[:3]]
    assert len(rank(query, chunks, top_k=25)) == 10


@pytest.mark.parametrize("top_k", [0, -2])
def test_rank_non_positive_top_k_is_empty(make_chunk, top_k):
    assert rank([1, 0, 0], [make_chunk(0, [1, 0, 0])], top_k=top_k) == []


def test_rank_empty_chunks():
    assert rank([1, 0, 0], []) == []
    assert rank([1, 0, 0], [], top_k=3) == []


def test_rank_skips_ineligible_chunks(make_chunk):
    """Missing, mismatched and zero vectors are excluded, not errors."""
    chunks = [
        Chunk(id="chunk-0", text="No vector yet."),
        make_chunk(1, [1, 0]),
        make_chunk(2, [0, 0, 0]),
        make_chunk(3, [0.5, 0.5, 0]),
    ]
    results = rank([1, 0, 0], chunks)

    assert [r.chunk.id for r in results] == ["chunk-3"]


def test_scored_chunk_percent(make_chunk):
    scored = ScoredChunk(chunk=make_chunk(0, [1, 0, 0]), similarity=0.9939, rank=1)

    assert scored.similarity_percent == 99


def test_ranker_retrieve_uses_query_vector(make_chunk):
    chunks = [make_chunk(0, [0, 1, 0]), make_chunk(1, [1, 0, 0]), make_chunk(2, [0, 0, 1])]
    ranker = SimilarityRanker(FixedVectorSource([1, 0, 0]), top_k=2)

    results = ranker.retrieve("what matters?", chunks)

    assert len(results) == 2
    assert results[0].chunk.id == "chunk-1"


def test_ranker_empty_query_returns_nothing(make_chunk):
    ranker = SimilarityRanker(FixedVectorSource([1, 0, 0]))

    assert ranker.retrieve("   ", [make_chunk(0, [1, 0, 0])]) == []


def test_ranker_embeds_fresh_query_each_time(rng):
    ranker = SimilarityRanker(RandomVectorSource(rng=rng))

    first = ranker.embed_query("same question")
    second = ranker.embed_query("same question")

    assert first.text == second.text == "same question"
    assert first.vector != second.vector
    assert ranker.top_k == 3


@pytest.mark.parametrize("top_k", [0, -1])
def test_ranker_rejects_non_positive_top_k(top_k):
    """An explicit top_k below 1 is an error, not a silent default."""
    with pytest.raises(ValueError, match="top_k must be at least 1"):
        SimilarityRanker(FixedVectorSource([1, 0, 0]), top_k=top_k)


def test_ranker_keeps_explicit_top_k():
    assert SimilarityRanker(FixedVectorSource([1, 0, 0]), top_k=1).top_k == 1


def test_query_vector_is_tuple():
    query = SimilarityRanker(FixedVectorSource([1, 0, 0])).embed_query("why?")

    assert query.vector == (1, 0, 0)
    assert isinstance(query.vector, tuple)
