"""Text chunking strategies for the RAG pipeline.

Implements five character-budgeted strategies (fixed-size, sentence,
paragraph, sliding-window, semantic) that share one skeleton: split the
text into units, greedily pack units into a buffer, flush the buffer when
the next unit would push it past chunk_size, and record the word overlap
with the previously flushed chunk.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union
import numpy as np
from pydantic import BaseModel, Field
import structlog

from ragviz import config
from ragviz.rag.overlap import Overlap, find_overlap
from ragviz.rag.vectors import RandomVectorSource, VectorSource, make_rng

logger = structlog.get_logger()

# A sentence is a run of non-terminators followed by one or more terminators
SENTENCE_PATTERN = re.compile(r"[^.!?]*[.!?]+")
PARAGRAPH_SEPARATOR = re.compile(r"\n\s*\n")

SEMANTIC_MIN_SENTENCES = 2
SEMANTIC_MAX_SENTENCES = 4


class StrategyId(str, Enum):
    """Closed set of chunking strategies."""

    FIXED_SIZE = "fixed-size"
    SENTENCE = "sentence"
    PARAGRAPH = "paragraph"
    SLIDING_WINDOW = "sliding-window"
    SEMANTIC = "semantic"

    @classmethod
    def parse(cls, value: Union[str, "StrategyId"]) -> "StrategyId":
        """Resolve a strategy name, raising ValueError for unknown names."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise ValueError(
                f"Unknown chunking strategy '{value}' (expected one of: {choices})"
            ) from None


class ChunkOptions(BaseModel):
    """Options accepted by every chunking strategy."""

    chunk_size: int = Field(
        default_factory=lambda: config.CHUNK_SIZE,
        gt=0,
        description="Character budget per chunk",
    )
    overlap_size: int = Field(
        default_factory=lambda: config.OVERLAP_SIZE,
        ge=0,
        description="Words carried into the next chunk when seeding",
    )
    carry_overlap: bool = Field(
        default=False,
        description="Sentence strategy: seed each new chunk with trailing words",
    )
    max_overlap_words: int = Field(
        default_factory=lambda: config.MAX_OVERLAP_WORDS,
        ge=1,
        le=30,
        description="Longest word run checked when detecting overlap",
    )


@dataclass(frozen=True)
class Chunk:
    """A contiguous (possibly overlapping) segment of source text."""

    id: str
    text: str
    vector: Optional[Tuple[float, ...]] = None
    overlap_start: Optional[str] = None
    overlap_end: Optional[str] = None

    def __post_init__(self):
        # Store vectors as tuples so a chunk cannot change after creation
        if self.vector is not None:
            object.__setattr__(self, "vector", tuple(float(v) for v in self.vector))

    @property
    def index(self) -> int:
        """Creation sequence number encoded in the id."""
        return int(self.id.rsplit("-", 1)[-1])

    @property
    def char_count(self) -> int:
        return len(self.text)

    @property
    def has_overlap(self) -> bool:
        return self.overlap_start is not None

    @property
    def overlap_word_count(self) -> int:
        if self.overlap_start is None:
            return 0
        return len(self.overlap_start.split())


ChunkOptionsLike = Union[ChunkOptions, Mapping[str, Any], None]


def split_sentences(text: str) -> List[str]:
    """Split text into sentences, keeping leading whitespace on each.

    Trailing text without a terminator becomes the last sentence, and text
    with no terminator at all is returned whole.
    """
    sentences = []
    last_end = 0
    for match in SENTENCE_PATTERN.finditer(text):
        sentences.append(match.group(0))
        last_end = match.end()

    if not sentences:
        return [text]

    remainder = text[last_end:]
    if remainder.strip():
        sentences.append(remainder)
    return sentences


def split_paragraphs(text: str) -> List[str]:
    """Split text on blank lines, dropping empty blocks."""
    return [p.strip() for p in PARAGRAPH_SEPARATOR.split(text) if p.strip()]


class _ChunkCollector:
    """Accumulates flushed chunk texts and their overlap with the previous one."""

    def __init__(self, max_overlap_words: int, detect_overlap: bool = True):
        self.max_overlap_words = max_overlap_words
        self.detect_overlap = detect_overlap
        self.pieces: List[Tuple[str, Optional[Overlap]]] = []

    def flush(self, buffer: str) -> None:
        text = buffer.strip()
        if not text:
            return

        overlap = None
        if self.detect_overlap and self.pieces:
            overlap = find_overlap(self.pieces[-1][0], text, self.max_overlap_words)

        self.pieces.append((text, overlap))


def _seed_buffer(flushed: str, seed_words: int, sentence: str) -> str:
    """Start a new buffer with the last seed_words words of the flushed one."""
    if seed_words <= 0:
        return sentence
    words = flushed.strip().split()
    return " ".join(words[-seed_words:]) + " " + sentence


class TextChunker:
    """Chunks text with a selectable strategy and attaches mock vectors."""

    def __init__(
        self,
        options: ChunkOptionsLike = None,
        vector_source: Optional[VectorSource] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """Initialize the text chunker.

        Args:
            options: Default chunk options (defaults from config)
            vector_source: Embedder for chunk vectors (random placeholder by default)
            rng: Randomness for semantic grouping; shared with the default
                vector source so one seed reproduces a whole run
        """
        self.options = _coerce_options(options)

        if rng is None:
            rng = getattr(vector_source, "rng", None)
        self.rng = rng if rng is not None else make_rng()
        self.vector_source = vector_source or RandomVectorSource(rng=self.rng)

        # Every StrategyId must have an entry here
        self._strategies: Dict[StrategyId, Callable] = {
            StrategyId.FIXED_SIZE: self._chunk_fixed_size,
            StrategyId.SENTENCE: self._chunk_sentence,
            StrategyId.PARAGRAPH: self._chunk_paragraph,
            StrategyId.SLIDING_WINDOW: self._chunk_sliding_window,
            StrategyId.SEMANTIC: self._chunk_semantic,
        }

        logger.info(
            "chunker_initialized",
            chunk_size=self.options.chunk_size,
            overlap_size=self.options.overlap_size,
            vector_dimension=self.vector_source.dimension,
        )

    def chunk_text(
        self,
        text: str,
        strategy: Union[str, StrategyId] = None,
        options: ChunkOptionsLike = None,
    ) -> List[Chunk]:
        """Split text into chunks with the given strategy.

        Args:
            text: Text to chunk
            strategy: Strategy id or name (default from config)
            options: Per-call options overriding the chunker defaults

        Returns:
            List of Chunk objects in document order

        Raises:
            ValueError: If the strategy name is unknown
        """
        strategy = StrategyId.parse(strategy or config.DEFAULT_STRATEGY)
        options = self.options if options is None else _coerce_options(options)

        if not text or not text.strip():
            logger.debug("empty_text_no_chunks", strategy=strategy.value)
            return []

        pieces = self._strategies[strategy](text, options)

        chunks = []
        for index, (piece_text, overlap) in enumerate(pieces):
            chunks.append(
                Chunk(
                    id=f"chunk-{index}",
                    text=piece_text,
                    vector=self.vector_source.embed(piece_text),
                    overlap_start=overlap.start if overlap else None,
                    overlap_end=overlap.end if overlap else None,
                )
            )

        logger.info(
            "text_chunked",
            strategy=strategy.value,
            text_length=len(text),
            chunk_count=len(chunks),
            avg_chunk_size=sum(c.char_count for c in chunks) // len(chunks),
        )

        return chunks

    def _chunk_fixed_size(self, text: str, options: ChunkOptions):
        collector = _ChunkCollector(options.max_overlap_words, detect_overlap=False)
        size = options.chunk_size
        for start in range(0, len(text), size):
            collector.flush(text[start:start + size])
        return collector.pieces

    def _chunk_sentence(self, text: str, options: ChunkOptions):
        if options.carry_overlap:
            return self._pack_sentences(
                text,
                options,
                lambda word_count: min(options.overlap_size, word_count // 2),
            )
        return self._pack_sentences(text, options)

    def _chunk_sliding_window(self, text: str, options: ChunkOptions):
        return self._pack_sentences(
            text,
            options,
            lambda word_count: min(options.overlap_size // 5, word_count // 2),
        )

    def _pack_sentences(
        self,
        text: str,
        options: ChunkOptions,
        seed_words: Optional[Callable[[int], int]] = None,
    ):
        """Greedily pack sentences, optionally seeding each new buffer.

        Args:
            text: Text to chunk
            options: Chunk options
            seed_words: Maps the flushed buffer's word count to the number of
                trailing words carried into the next buffer
        """
        collector = _ChunkCollector(options.max_overlap_words)
        buffer = ""

        for sentence in split_sentences(text):
            if buffer.strip() and len(buffer + sentence) > options.chunk_size:
                collector.flush(buffer)
                carried = seed_words(len(buffer.split())) if seed_words else 0
                buffer = _seed_buffer(buffer, carried, sentence)
            else:
                buffer += sentence

        collector.flush(buffer)
        return collector.pieces

    def _chunk_paragraph(self, text: str, options: ChunkOptions):
        if not PARAGRAPH_SEPARATOR.search(text):
            logger.debug("no_paragraph_separators_falling_back_to_sentences")
            return self._chunk_sentence(text, options)

        collector = _ChunkCollector(options.max_overlap_words)
        buffer = ""

        for paragraph in split_paragraphs(text):
            candidate = f"{buffer}\n\n{paragraph}" if buffer else paragraph
            if buffer and len(candidate) > options.chunk_size:
                collector.flush(buffer)
                buffer = paragraph
            else:
                buffer = candidate

        collector.flush(buffer)
        return collector.pieces

    def _chunk_semantic(self, text: str, options: ChunkOptions):
        """Group sentences into randomly sized runs of 2-4.

        The group size is random on purpose: it stands in for topic
        boundaries a real semantic chunker would detect.
        """
        collector = _ChunkCollector(options.max_overlap_words)
        sentences = split_sentences(text)
        last = len(sentences) - 1

        buffer = ""
        count = 0
        target = self._semantic_group_size()

        for i, sentence in enumerate(sentences):
            if buffer.strip() and len(buffer + sentence) > options.chunk_size:
                collector.flush(buffer)
                buffer, count = "", 0
                target = self._semantic_group_size()

            buffer += sentence
            count += 1

            if count >= target or i == last:
                collector.flush(buffer)
                buffer, count = "", 0
                target = self._semantic_group_size()

        return collector.pieces

    def _semantic_group_size(self) -> int:
        return int(self.rng.integers(SEMANTIC_MIN_SENTENCES, SEMANTIC_MAX_SENTENCES + 1))


def _coerce_options(options: ChunkOptionsLike) -> ChunkOptions:
    if options is None:
        return ChunkOptions()
    if isinstance(options, ChunkOptions):
        return options
    return ChunkOptions(**options)


def get_chunk_stats(chunks: List[Chunk], strategy: Union[str, StrategyId] = None) -> dict:
    """Get statistics about a set of chunks.

    Args:
        chunks: List of Chunk objects
        strategy: Strategy that produced them, echoed into the stats

    Returns:
        Dictionary with chunk statistics
    """
    strategy_name = StrategyId.parse(strategy).value if strategy else None

    if not chunks:
        return {
            "strategy": strategy_name,
            "chunk_count": 0,
            "total_chars": 0,
            "avg_chunk_size": 0,
            "min_chunk_size": 0,
            "max_chunk_size": 0,
            "overlapping_chunks": 0,
        }

    chunk_sizes = [c.char_count for c in chunks]

    return {
        "strategy": strategy_name,
        "chunk_count": len(chunks),
        "total_chars": sum(chunk_sizes),
        "avg_chunk_size": sum(chunk_sizes) // len(chunks),
        "min_chunk_size": min(chunk_sizes),
        "max_chunk_size": max(chunk_sizes),
        "overlapping_chunks": sum(1 for c in chunks if c.has_overlap),
    }


# Singleton instance for convenience
_chunker_instance: Optional[TextChunker] = None


def get_chunker() -> TextChunker:
    """Get a singleton text chunker instance.

    Returns:
        TextChunker instance with default config
    """
    global _chunker_instance
    if _chunker_instance is None:
        _chunker_instance = TextChunker()
    return _chunker_instance


# Convenience function
def chunk(
    text: str,
    strategy: Union[str, StrategyId] = None,
    options: ChunkOptionsLike = None,
) -> List[Chunk]:
    """Chunk text using the default chunker (convenience function).

    Args:
        text: Text to chunk
        strategy: Strategy id or name
        options: Chunk options (ChunkOptions or a plain dict)

    Returns:
        List of Chunk objects
    """
    return get_chunker().chunk_text(text, strategy, options)
