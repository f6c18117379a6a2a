"""Tests for mock response synthesis."""
import pytest

from ragviz.rag.retriever import ScoredChunk
from ragviz.rag.responder import GENERAL_PHRASE, PROCESS_PHRASE, synthesize


@pytest.fixture
def top_chunks(make_chunk):
    return [
        ScoredChunk(chunk=make_chunk(0, [1, 0, 0], text="Chunks are embedded first."), similarity=0.9, rank=1),
        ScoredChunk(chunk=make_chunk(1, [0, 1, 0], text="Then they are ranked."), similarity=0.2, rank=2),
    ]


def test_how_question_uses_process_phrasing(top_chunks):
    response = synthesize("How does retrieval work?", top_chunks)

    assert PROCESS_PHRASE in response
    assert GENERAL_PHRASE not in response


def test_other_question_uses_general_phrasing(top_chunks):
    response = synthesize("What is an embedding?", top_chunks)

    assert GENERAL_PHRASE in response
    assert PROCESS_PHRASE not in response


def test_response_quotes_top_chunk(top_chunks):
    response = synthesize("What is an embedding?", top_chunks)

    assert response == (
        "Based on the retrieved context, we can understand that the information "
        "from the most relevant chunks. Chunks are embedded first.... This "
        "demonstrates the key concepts related to your query."
    )


def test_preview_truncated_to_150_chars(make_chunk):
    long_chunk = ScoredChunk(chunk=make_chunk(0, [1, 0, 0], text="x" * 300), similarity=0.5)
    response = synthesize("Why?", [long_chunk])

    assert "x" * 150 + "..." in response
    assert "x" * 151 not in response


def test_synthesize_is_deterministic(top_chunks):
    assert synthesize("how?", top_chunks) == synthesize("how?", top_chunks)


def test_synthesize_requires_chunks():
    with pytest.raises(ValueError, match="without retrieved chunks"):
        synthesize("How does it work?", [])
