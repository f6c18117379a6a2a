"""Vector math and the embedding boundary for the RAG pipeline.

Handles:
- Cosine similarity between two vectors
- Mock vector generation (uniform random placeholders)
- The VectorSource interface a real embedding model can plug into
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
import numpy as np
import structlog

from ragviz import config

logger = structlog.get_logger()


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create the randomness source shared by vectors and semantic grouping.

    Args:
        seed: Optional seed (default from config, None = unseeded)

    Returns:
        numpy Generator instance
    """
    if seed is None:
        seed = config.RANDOM_SEED
    return np.random.default_rng(seed)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors.

    Returns NaN when either vector is the zero vector; callers treat that
    as "no meaningful similarity".

    Raises:
        ValueError: If the vectors have different lengths
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)

    if va.shape != vb.shape:
        raise ValueError(
            f"Vector dimensions differ ({va.shape[0]} vs {vb.shape[0]})"
        )

    denominator = np.linalg.norm(va) * np.linalg.norm(vb)
    if denominator == 0:
        return float("nan")

    similarity = float(np.dot(va, vb) / denominator)
    # Floating point drift can push |v.v|/|v|^2 slightly past 1
    return max(-1.0, min(1.0, similarity))


def generate_vector(
    dimension: int = None, rng: Optional[np.random.Generator] = None
) -> List[float]:
    """Generate a mock embedding with values uniform in [-1, 1].

    Args:
        dimension: Vector length (default from config)
        rng: Randomness source (a fresh unseeded one if not provided)

    Returns:
        List of floats (empty for dimension 0)

    Raises:
        ValueError: If dimension is negative
    """
    dimension = config.EMBEDDING_DIMENSION if dimension is None else dimension
    if dimension < 0:
        raise ValueError(f"Dimension must not be negative, got {dimension}")
    rng = rng if rng is not None else np.random.default_rng()
    return rng.uniform(-1.0, 1.0, size=dimension).tolist()


class VectorSource(ABC):
    """Produces a vector for a piece of text."""

    dimension: int

    @abstractmethod
    def embed(self, text: str) -> List[float]:
        """Return the vector for ``text``."""


class RandomVectorSource(VectorSource):
    """Placeholder embedder: ignores the text and returns random values.

    The vectors carry no semantic meaning, only shape compatibility.
    """

    def __init__(
        self,
        dimension: int = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """Initialize the random vector source.

        Args:
            dimension: Vector length (default from config)
            rng: Randomness source (default from make_rng)
        """
        self.dimension = config.EMBEDDING_DIMENSION if dimension is None else dimension
        self.rng = rng if rng is not None else make_rng()

        if self.dimension < 1:
            raise ValueError(f"Dimension must be positive, got {self.dimension}")

        logger.debug("random_vector_source_initialized", dimension=self.dimension)

    def embed(self, text: str) -> List[float]:
        return generate_vector(self.dimension, self.rng)
