"""Error types raised by the assistant core."""

from __future__ import annotations

from typing import Literal


class AssistantError(Exception):
    """Base error for the assistant core, carrying a machine-readable code."""

    code = "ASSISTANT_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        self.code = code or self.code
        self.message = message
        super().__init__(message)


class ValidationError(AssistantError):
    """Raised for an empty/missing question or an empty symptom list."""

    code = "INVALID_INPUT"


class ProviderError(AssistantError):
    """Raised when the embedding or generation provider call fails.

    ``stage`` tells the engines whether the failure is fatal (``embed``)
    or recoverable through the degraded path (``generate``).
    """

    code = "PROVIDER_ERROR"

    def __init__(self, message: str, stage: Literal["embed", "generate"]) -> None:
        self.stage = stage
        super().__init__(message)


class AnswerGenerationError(AssistantError):
    """Raised when neither the model nor the retrieved context can produce an answer."""

    code = "ANSWER_FAILED"
