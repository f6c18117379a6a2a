"""Templated mock responses built from retrieved chunks.

No text is generated: the response quotes the best chunk inside a fixed
template so the retrieval stage can be shown end to end.
"""
from typing import Sequence
import structlog

from ragviz import config
from ragviz.rag.retriever import ScoredChunk

logger = structlog.get_logger()

PROCESS_PHRASE = "the process involves"
GENERAL_PHRASE = "we can understand that"


def synthesize(query: str, top_chunks: Sequence[ScoredChunk]) -> str:
    """Build a mock answer for a query from the ranked chunks.

    Args:
        query: User query text
        top_chunks: Retrieved chunks, best first

    Returns:
        Response string quoting the start of the best chunk

    Raises:
        ValueError: If no chunks were retrieved
    """
    if not top_chunks:
        raise ValueError("Cannot synthesize a response without retrieved chunks")

    phrase = PROCESS_PHRASE if "how" in query.lower() else GENERAL_PHRASE
    preview = top_chunks[0].chunk.text[: config.RESPONSE_PREVIEW_CHARS]

    response = (
        f"Based on the retrieved context, {phrase} the information from the most "
        f"relevant chunks. {preview}... This demonstrates the key concepts "
        f"related to your query."
    )

    logger.debug(
        "response_synthesized",
        query_length=len(query),
        chunks_used=len(top_chunks),
        response_length=len(response),
    )

    return response
