"""Tests for overlap detection between consecutive chunks."""
from ragviz.rag.overlap import Overlap, find_overlap


def test_overlap_found_case_insensitive():
    """The shared run is matched ignoring case, keeping each side's casing."""
    overlap = find_overlap("the quick brown fox", "Brown Fox jumps over")

    assert overlap == Overlap(start="Brown Fox", end="brown fox")
    assert overlap.word_count == 2


def test_no_shared_words_returns_none():
    assert find_overlap("alpha beta gamma", "delta epsilon") is None


def test_empty_text_returns_none():
    assert find_overlap("", "anything here") is None
    assert find_overlap("anything here", "") is None
    assert find_overlap("   ", "anything") is None


def test_longest_match_wins():
    """When several run lengths match, the longest one is returned."""
    overlap = find_overlap("x a b a b", "a b a b c")

    assert overlap.start == "a b a b"
    assert overlap.word_count == 4


def test_match_longer_than_window_is_ignored():
    """Runs longer than max_words are not considered."""
    prev_text = "one two three"
    next_text = "one two three four"

    assert find_overlap(prev_text, next_text, max_words=3).start == "one two three"
    assert find_overlap(prev_text, next_text, max_words=2) is None


def test_whitespace_runs_are_normalized():
    """Tokenization is on any whitespace, joined back with single spaces."""
    overlap = find_overlap("end of\nthe  line", "the line  continues")

    assert overlap.start == "the line"
    assert overlap.end == "the line"
