"""Pytest configuration and fixtures for unit tests."""
import numpy as np
import pytest

from ragviz import config
from ragviz.rag.chunker import Chunk, TextChunker


# Test configuration
SEED = 42
SCENARIO_TEXT = (
    "RAG combines retrieval with generation. It improves accuracy. "
    "It reduces hallucination."
)


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded randomness source."""
    return np.random.default_rng(SEED)


@pytest.fixture
def chunker(rng) -> TextChunker:
    """Chunker with default options and seeded vectors."""
    return TextChunker(rng=rng)


@pytest.fixture
def sample_text() -> str:
    """The built-in RAG explainer document."""
    return config.SAMPLE_TEXT


@pytest.fixture
def scenario_text() -> str:
    """Three short sentences about RAG."""
    return SCENARIO_TEXT


@pytest.fixture
def make_chunk():
    """Factory for chunks with explicit vectors."""

    def _make(index: int, vector, text: str = None) -> Chunk:
        return Chunk(id=f"chunk-{index}", text=text or f"Chunk number {index}.", vector=vector)

    return _make
