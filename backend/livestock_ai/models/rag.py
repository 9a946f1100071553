"""Pydantic models for RAG: knowledge chunks, retrieval results, and answers."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Confidence = Literal["High", "Medium", "Low"]

# "model": text came from the generative model.
# "heuristic": degraded answer or rule-based diagnosis.
# "no_evidence": canned response because retrieval found nothing.
Provenance = Literal["model", "heuristic", "no_evidence"]


class TextChunk(BaseModel):
    """A pre-embedded unit of knowledge-base text, owned by the chunk store."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    embedding: list[float]
    source_document_id: str


class SimilarityResult(BaseModel):
    """A chunk scored against a query vector."""

    model_config = ConfigDict(frozen=True)

    chunk: TextChunk
    score: float


class SourceReference(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text_preview: str = Field(alias="textPreview")
    similarity: float
    chunk_id: str = Field(alias="chunkId")


class GeneratedAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)

    answer: str
    sources: list[SourceReference]
    provenance: Provenance


class Diagnosis(BaseModel):
    """Structured diagnosis; every textual field is always populated."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    disease: str = Field(min_length=1)
    confidence: Confidence
    explanation: str = Field(min_length=1)
    treatment: str = Field(min_length=1)
    raw_response: str = Field(default="", alias="rawResponse")
    provenance: Provenance


# --- Generation request ---


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"]
    content: str


class SamplingParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_tokens: int
    temperature: float
    top_p: float
    frequency_penalty: float
    presence_penalty: float


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    model: str
    messages: list[ChatMessage]
    sampling: SamplingParams


class GenerationOutcome(BaseModel):
    """Result of one generation attempt, tagged with where the text came from.

    ``text`` is the model completion when ``provenance == "model"``; it is
    empty when the provider failed and the caller must take its heuristic path.
    """

    model_config = ConfigDict(frozen=True)

    provenance: Literal["model", "heuristic"]
    text: str = ""
    error: str | None = None
