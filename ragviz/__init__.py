"""RAG pipeline visualizer core: chunking, similarity scoring and mock responses."""

__version__ = "0.1.0"
