"""Symptom-based diagnosis with retrieval, model generation, and rule fallback."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from livestock_ai.config import Settings
from livestock_ai.errors import ValidationError
from livestock_ai.models.rag import Diagnosis, GenerationRequest, SamplingParams, TextChunk
from livestock_ai.services import fallback_classifier, retrieval
from livestock_ai.services.prompts import (
    DIAGNOSIS_SYSTEM_PROMPT,
    build_diagnostic_prompt,
    build_diagnostic_query,
    build_messages,
)
from livestock_ai.services.provider import GenAIProvider, attempt_generation
from livestock_ai.services.response_parser import parse_diagnosis

logger = logging.getLogger(__name__)

INSUFFICIENT_KNOWLEDGE_EXPLANATION = (
    "Insufficient information in knowledge base to diagnose based on these symptoms."
)


def no_evidence_diagnosis() -> Diagnosis:
    return Diagnosis(
        disease="Unknown",
        confidence="Low",
        explanation=INSUFFICIENT_KNOWLEDGE_EXPLANATION,
        treatment="General care",
        raw_response="",
        provenance="no_evidence",
    )


def clean_symptoms(symptoms: Sequence[str] | None) -> list[str]:
    """Strip symptoms and drop blank entries, preserving order.

    Raises ``ValidationError`` when nothing is left.
    """
    cleaned = [s.strip() for s in symptoms or [] if s and s.strip()]
    if not cleaned:
        raise ValidationError("At least one symptom is required")
    return cleaned


class DiagnosticEngine:
    """Diagnose livestock disease from an ordered symptom list.

    Once the symptom list is valid this always returns a ``Diagnosis``,
    unless embedding the diagnostic query fails (``ProviderError``).
    """

    def __init__(self, provider: GenAIProvider, settings: Settings) -> None:
        self.provider = provider
        self.settings = settings

    def _sampling(self) -> SamplingParams:
        s = self.settings
        return SamplingParams(
            max_tokens=s.diagnosis_max_tokens,
            temperature=s.diagnosis_temperature,
            top_p=s.diagnosis_top_p,
            frequency_penalty=s.diagnosis_frequency_penalty,
            presence_penalty=s.diagnosis_presence_penalty,
        )

    async def diagnose(
        self,
        symptoms: Sequence[str],
        corpus: Sequence[TextChunk],
    ) -> Diagnosis:
        symptoms = clean_symptoms(symptoms)
        logger.info("Diagnosing from %d symptoms: %s", len(symptoms), symptoms)

        query = build_diagnostic_query(symptoms)
        query_vector = await self.provider.embed(query)

        results = retrieval.top_k(corpus, query_vector, self.settings.diagnosis_top_k)
        if not results:
            logger.info("No relevant medical knowledge found; returning canned diagnosis")
            return no_evidence_diagnosis()
        logger.info("Found %d relevant knowledge chunks", len(results))

        prompt = build_diagnostic_prompt(symptoms, [r.chunk for r in results])
        request = GenerationRequest(
            model=self.settings.diagnosis_model,
            messages=build_messages(DIAGNOSIS_SYSTEM_PROMPT, prompt),
            sampling=self._sampling(),
        )
        outcome = await attempt_generation(self.provider, request)

        if outcome.provenance == "model":
            diagnosis = parse_diagnosis(outcome.text)
        else:
            diagnosis = fallback_classifier.classify(symptoms)

        logger.info(
            "Diagnosis: %s (%s confidence, provenance=%s)",
            diagnosis.disease,
            diagnosis.confidence,
            diagnosis.provenance,
        )
        return diagnosis
