"""Command-line entry point for the RAG pipeline visualizer.

Usage:
    ragviz --sample --query "How does RAG work?"
    ragviz --file notes.txt --strategy paragraph --chunk-size 400
    ragviz --sample --strategy semantic --seed 7 --query "What are embeddings?"
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from ragviz import config
from ragviz.pipeline import RagSession
from ragviz.rag.chunker import ChunkOptions, StrategyId
from ragviz.rag.vectors import make_rng

logger = structlog.get_logger()


def configure_logging(level: str = None) -> None:
    """Configure structured logging (JSON lines on stderr)."""
    level = (level or config.LOG_LEVEL).upper()
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ragviz",
        description="Walk a document through chunking, similarity and retrieval",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ragviz --sample --query "How does RAG work?"
  ragviz --file notes.txt --strategy paragraph
  ragviz --sample --strategy sentence --carry-overlap --seed 1
        """,
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", type=Path, help="Plain text document to chunk")
    source.add_argument("--sample", action="store_true", help="Use the built-in sample text")

    parser.add_argument(
        "--strategy",
        choices=[s.value for s in StrategyId],
        default=config.DEFAULT_STRATEGY,
        help=f"Chunking strategy (default: {config.DEFAULT_STRATEGY})",
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=config.CHUNK_SIZE,
        help=f"Characters per chunk (default: {config.CHUNK_SIZE})",
    )
    parser.add_argument(
        "--overlap-size",
        type=int,
        default=config.OVERLAP_SIZE,
        help=f"Words carried between chunks (default: {config.OVERLAP_SIZE})",
    )
    parser.add_argument(
        "--carry-overlap",
        action="store_true",
        help="Sentence strategy: seed each chunk with the previous chunk's tail",
    )
    parser.add_argument(
        "--top-k",
        type=_positive_int,
        default=config.RETRIEVAL_TOP_K,
        help=f"Chunks used per response (default: {config.RETRIEVAL_TOP_K})",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible vectors")
    parser.add_argument(
        "--query",
        "-q",
        action="append",
        default=[],
        help="Question to answer (repeatable)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug logs")

    return parser


def _print_chunks(session: RagSession) -> None:
    stats = session.stats
    print(f"\n{'=' * 60}")
    print(f"  Chunks ({stats['strategy']}): {stats['chunk_count']}")
    print(f"{'=' * 60}\n")

    for c in session.chunks:
        vector = ", ".join(f"{v:+.3f}" for v in c.vector or [])
        print(f"  [{c.id}] {c.char_count} chars  vector=[{vector}]")
        if c.has_overlap:
            print(f"     ↔ Overlap: {c.overlap_word_count} words ({c.overlap_start!r})")
        print(f"     {c.text}\n")

    print(f"  Avg size: {stats['avg_chunk_size']} chars  "
          f"(min {stats['min_chunk_size']}, max {stats['max_chunk_size']})")
    print(f"  Chunks with overlap: {stats['overlapping_chunks']}")


def _print_answer(session: RagSession, query: str) -> None:
    print(f"\n{'=' * 60}")
    print(f"  Query: {query}")
    print(f"{'=' * 60}\n")

    # One query vector per question: the shown ranking is the one answered from
    ranked = session.similarities(query, top_k=len(session.chunks))
    for scored in ranked[: config.SIMILARITY_TOP_K]:
        print(f"  #{scored.rank} {scored.chunk.id:<10} {scored.similarity_percent:>4}%")

    entry = session.ask(query, ranked=ranked)
    print(f"\n  Sources: {', '.join(entry.sources)}")
    print(f"\n  {entry.response}\n")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else None)

    try:
        text = config.SAMPLE_TEXT if args.sample else args.file.read_text(encoding="utf-8")

        options = ChunkOptions(
            chunk_size=args.chunk_size,
            overlap_size=args.overlap_size,
            carry_overlap=args.carry_overlap,
        )
        session = RagSession(
            strategy=args.strategy,
            options=options,
            rng=make_rng(args.seed),
            top_k=args.top_k,
        )

        chunks = session.load_text(text)
        if not chunks:
            print("\n⚠️  The document is empty, nothing to chunk.\n")
            return 1

        _print_chunks(session)

        for query in args.query:
            _print_answer(session, query)

        return 0

    except FileNotFoundError as e:
        print(f"\n❌ Error: {e}\n")
        return 1

    except ValueError as e:
        print(f"\n❌ Error: {e}\n")
        return 1

    except Exception as e:
        print(f"\n❌ Error: {e}\n")
        logger.error("ragviz_cli_failed", error=str(e), error_type=type(e).__name__)
        return 1


if __name__ == "__main__":
    sys.exit(main())
