"""Application configuration with sensible defaults."""
import os

# Chunking parameters (character-based, matches what the visualizer shows)
CHUNK_SIZE = int(os.getenv("CHUNK_SIZE", "200"))
OVERLAP_SIZE = int(os.getenv("OVERLAP_SIZE", "30"))          # words carried between chunks
MAX_OVERLAP_WORDS = int(os.getenv("MAX_OVERLAP_WORDS", "20"))  # overlap detection window
DEFAULT_STRATEGY = os.getenv("DEFAULT_STRATEGY", "sentence")

# Mock embeddings
EMBEDDING_DIMENSION = int(os.getenv("EMBEDDING_DIMENSION", "3"))
_seed = os.getenv("RANDOM_SEED")
RANDOM_SEED = int(_seed) if _seed else None  # None = fresh randomness every run

# Retrieval & response
RETRIEVAL_TOP_K = int(os.getenv("RETRIEVAL_TOP_K", "3"))
SIMILARITY_TOP_K = int(os.getenv("SIMILARITY_TOP_K", "5"))
RESPONSE_PREVIEW_CHARS = int(os.getenv("RESPONSE_PREVIEW_CHARS", "150"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Demo document used by the CLI --sample flag
SAMPLE_TEXT = (
    "Retrieval Augmented Generation (RAG) is a technique that combines the power "
    "of large language models with external knowledge retrieval. This approach "
    "allows AI systems to access up-to-date information and domain-specific "
    "knowledge that wasn't part of their training data. The process works in "
    "three main steps. First, documents are split into smaller chunks for "
    "efficient processing. Second, these chunks are converted into embeddings, "
    "which are numerical representations that capture semantic meaning. Third, "
    "when a user asks a question, the system retrieves the most relevant chunks "
    "and uses them to generate an informed response. This technique significantly "
    "improves the accuracy and reliability of AI-generated content."
)
