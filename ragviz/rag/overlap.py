"""Overlap detection between consecutive chunks."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Overlap:
    """A word run shared by the end of one chunk and the start of the next.

    ``start`` is taken from the next chunk's prefix and ``end`` from the
    previous chunk's suffix. They compare equal case-insensitively.
    """

    start: str
    end: str

    @property
    def word_count(self) -> int:
        return len(self.start.split())


def find_overlap(prev_text: str, next_text: str, max_words: int = 20) -> Optional[Overlap]:
    """Find the longest word run ending prev_text that also starts next_text.

    Args:
        prev_text: Text of the previous chunk
        next_text: Text of the following chunk
        max_words: Longest run (in words) to look for

    Returns:
        Overlap for the longest match, or None if no run up to max_words matches
    """
    prev_words = prev_text.split()
    next_words = next_text.split()

    if not prev_words or not next_words:
        return None

    for i in range(min(max_words, len(prev_words)), 0, -1):
        suffix = " ".join(prev_words[-i:])
        prefix = " ".join(next_words[:i])
        if suffix.lower() == prefix.lower():
            return Overlap(start=prefix, end=suffix)

    return None
