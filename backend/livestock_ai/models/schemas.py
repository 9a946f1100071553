"""Pydantic request/error schemas for the assistant API.

Responses reuse ``GeneratedAnswer`` and ``Diagnosis`` from ``models.rag``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AnswerRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str
    top_k: int = Field(default=3, alias="topK", ge=1, le=20)


class DiagnoseRequest(BaseModel):
    symptoms: list[str]


# --- Error schema ---


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: dict = {}
