"""Open question answering over the livestock knowledge base."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from livestock_ai.config import Settings
from livestock_ai.errors import AnswerGenerationError, ValidationError
from livestock_ai.models.rag import (
    GeneratedAnswer,
    GenerationRequest,
    SamplingParams,
    SimilarityResult,
    SourceReference,
    TextChunk,
)
from livestock_ai.services import retrieval
from livestock_ai.services.prompts import (
    ANSWER_SYSTEM_PROMPT,
    build_general_prompt,
    build_messages,
)
from livestock_ai.services.provider import GenAIProvider, attempt_generation

logger = logging.getLogger(__name__)

INSUFFICIENT_INFORMATION_ANSWER = (
    "I don't have enough information in the uploaded documents to answer this "
    "question. Please make sure you've uploaded relevant documents."
)


def preview(text: str, limit: int) -> str:
    """First ``limit`` characters of ``text`` followed by an ellipsis marker."""
    return text[:limit] + "..."


def degraded_answer(question: str, results: Sequence[SimilarityResult], limit: int) -> str:
    """Build an answer from retrieved chunk previews when the model is unavailable."""
    if not results:
        raise AnswerGenerationError(
            "Unable to generate answer - please try rephrasing your question "
            "or upload more relevant documents."
        )
    numbered = "\n\n".join(
        f"{idx}. {preview(r.chunk.text, limit)}" for idx, r in enumerate(results, start=1)
    )
    return (
        f"Based on the available information in your documents:\n\n{numbered}\n\n"
        f'I recommend consulting these sections for more details about "{question}". '
        "For specific medical advice, please consult with a qualified veterinarian."
    )


class AnswerGenerator:
    """Embed a question, retrieve context, and answer it with the model.

    Generation failures degrade to a context-preview answer; embedding
    failures propagate as ``ProviderError``.
    """

    def __init__(self, provider: GenAIProvider, settings: Settings) -> None:
        self.provider = provider
        self.settings = settings

    def _sampling(self) -> SamplingParams:
        s = self.settings
        return SamplingParams(
            max_tokens=s.answer_max_tokens,
            temperature=s.answer_temperature,
            top_p=s.answer_top_p,
            frequency_penalty=s.answer_frequency_penalty,
            presence_penalty=s.answer_presence_penalty,
        )

    def _sources(self, results: Sequence[SimilarityResult]) -> list[SourceReference]:
        return [
            SourceReference(
                text_preview=preview(r.chunk.text, self.settings.preview_chars),
                similarity=r.score,
                chunk_id=r.chunk.id,
            )
            for r in results
        ]

    async def generate_answer(
        self,
        question: str,
        corpus: Sequence[TextChunk],
        top_k: int = 3,
    ) -> GeneratedAnswer:
        if not question or not question.strip():
            raise ValidationError("Question must not be empty")
        question = question.strip()
        logger.info("Answering question: %r (top_k=%d)", question, top_k)

        query_vector = await self.provider.embed(question)
        results = retrieval.top_k(corpus, query_vector, top_k)
        if not results:
            logger.info("No relevant chunks for question; returning canned answer")
            return GeneratedAnswer(
                answer=INSUFFICIENT_INFORMATION_ANSWER,
                sources=[],
                provenance="no_evidence",
            )

        logger.info(
            "Found %d relevant chunks (similarity scores: %s)",
            len(results),
            ", ".join(f"{r.score:.3f}" for r in results),
        )
        prompt = build_general_prompt(question, [r.chunk for r in results])
        request = GenerationRequest(
            model=self.settings.answer_model,
            messages=build_messages(ANSWER_SYSTEM_PROMPT, prompt),
            sampling=self._sampling(),
        )
        outcome = await attempt_generation(self.provider, request)

        if outcome.provenance == "model":
            answer = outcome.text
        else:
            answer = degraded_answer(question, results, self.settings.preview_chars)

        logger.info("Answer generated (provenance=%s)", outcome.provenance)
        return GeneratedAnswer(
            answer=answer,
            sources=self._sources(results),
            provenance=outcome.provenance,
        )
