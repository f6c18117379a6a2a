"""Session-scoped conversation memory."""
from ragviz.memory.manager import ConversationEntry, ConversationHistory

__all__ = ["ConversationEntry", "ConversationHistory"]
