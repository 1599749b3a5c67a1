"""RAGAS (Retrieval Augmented Generation Assessment) metrics.

Scores a RAG answer with three LLM-judged metrics:
- AnswerRelevance: does the answer address the question?
- ContextRelevance: how focused is the retrieved context?
- Faithfulness: are the answer's claims supported by the context?

The overall ``ragas_score`` is the harmonic mean of the three.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional

from ..prompts import load_packaged_prompt
from .similarity import cosine_similarity

if TYPE_CHECKING:
    from ..llm.base import LLMProvider

FINAL_VERDICT_PATTERN = re.compile(r"Final verdict for each statement in order:\s*(.*)")
SENTENCE_PATTERN = re.compile(r"[^.!?\n]+[.!?]*")
INSUFFICIENT_INFORMATION = "Insufficient Information"

TRUTHY_VERDICTS = ("yes", "true", "y", "1")


def sentence_count(text: Optional[str]) -> int:
    """Number of non-blank sentences in text."""
    if not text:
        return 0
    return sum(1 for sentence in SENTENCE_PATTERN.findall(text) if sentence.strip(" .!?\t"))


class AnswerRelevance:
    """Mean similarity between the question and questions generated from the answer."""

    def __init__(self, llm: LLMProvider, batch_size: int = 3):
        self.llm = llm
        self.batch_size = batch_size
        self.template = load_packaged_prompt("ragas/answer_relevance")

    async def score(self, question: str, answer: str) -> float:
        prompt = self.template.format(answer=answer)
        original = await self._embed(question)

        scores = []
        for _ in range(self.batch_size):
            generated = (await self.llm.complete(prompt)).completion or ""
            similarity = cosine_similarity(original, await self._embed(generated))
            scores.append(similarity or 0.0)
        return sum(scores) / len(scores) if scores else 0.0

    async def _embed(self, text: str) -> list[float]:
        return (await self.llm.embed(text)).embedding or []


class ContextRelevance:
    """Share of context sentences the LLM extracts as relevant to the question."""

    def __init__(self, llm: LLMProvider):
        self.llm = llm
        self.template = load_packaged_prompt("ragas/context_relevance")

    async def score(self, question: str, context: str) -> float:
        prompt = self.template.format(question=question, context=context)
        sentences = (await self.llm.complete(prompt)).completion or ""
        if INSUFFICIENT_INFORMATION.lower() in sentences.lower():
            return 0.0

        total = sentence_count(context)
        if total == 0:
            return 0.0
        return min(sentence_count(sentences) / total, 1.0)


class Faithfulness:
    """Share of the answer's statements the LLM verifies against the context.

    F = |V| / |S| where V are the supported statements and S all statements.
    """

    def __init__(self, llm: LLMProvider):
        self.llm = llm
        self.statements_template = load_packaged_prompt("ragas/faithfulness_statements")
        self.verdicts_template = load_packaged_prompt("ragas/faithfulness_verdicts")

    async def score(self, question: str, answer: str, context: str) -> float:
        statements = await self._extract_statements(question, answer)
        statements_count = len([line for line in statements.split("\n") if line.strip()])
        if statements_count == 0:
            return 0.0

        prompt = self.verdicts_template.format(context=context, statements=statements)
        verdicts = (await self.llm.complete(prompt)).completion or ""
        return count_verified_statements(verdicts) / statements_count

    async def _extract_statements(self, question: str, answer: str) -> str:
        prompt = self.statements_template.format(question=question, answer=answer)
        return (await self.llm.complete(prompt)).completion or ""


def count_verified_statements(verdicts: str) -> int:
    """Count "Yes" verdicts on the "Final verdict for each statement in order:" line."""
    match = FINAL_VERDICT_PATTERN.search(verdicts)
    if not match:
        return 0
    return sum(
        1 for value in match.group(1).split(".") if value.strip().lower() in TRUTHY_VERDICTS
    )


def harmonic_mean(*scores: float) -> float:
    """Harmonic mean; 0 when any score is 0."""
    if not scores or any(score <= 0 for score in scores):
        return 0.0
    return len(scores) / sum(1.0 / score for score in scores)


class RagasEvaluator:
    """Runs all three metrics with one LLM.

    Example:
        scores = await RagasEvaluator(llm).score(question, answer, context)
        # {"ragas_score": 0.66, "answer_relevance_score": 0.95,
        #  "context_relevance_score": 0.66, "faithfulness_score": 0.5}
    """

    def __init__(self, llm: LLMProvider):
        self.llm = llm
        self.answer_relevance = AnswerRelevance(llm)
        self.context_relevance = ContextRelevance(llm)
        self.faithfulness = Faithfulness(llm)

    async def score(self, question: str, answer: str, context: str) -> dict[str, float]:
        answer_relevance = await self.answer_relevance.score(question, answer)
        context_relevance = await self.context_relevance.score(question, context)
        faithfulness = await self.faithfulness.score(question, answer, context)
        return {
            "ragas_score": harmonic_mean(answer_relevance, context_relevance, faithfulness),
            "answer_relevance_score": answer_relevance,
            "context_relevance_score": context_relevance,
            "faithfulness_score": faithfulness,
        }


__all__ = [
    "AnswerRelevance",
    "ContextRelevance",
    "Faithfulness",
    "RagasEvaluator",
    "count_verified_statements",
    "harmonic_mean",
    "sentence_count",
]
