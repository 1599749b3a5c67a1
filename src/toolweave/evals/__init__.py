"""RAG evaluation metrics."""

from .ragas import AnswerRelevance, ContextRelevance, Faithfulness, RagasEvaluator
from .similarity import cosine_similarity

__all__ = [
    "AnswerRelevance",
    "ContextRelevance",
    "Faithfulness",
    "RagasEvaluator",
    "cosine_similarity",
]
