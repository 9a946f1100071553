"""Assistant API endpoints: knowledge-base Q&A and symptom diagnosis."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from livestock_ai.config import settings
from livestock_ai.database import get_session
from livestock_ai.errors import (
    AnswerGenerationError,
    AssistantError,
    ProviderError,
    ValidationError,
)
from livestock_ai.models.rag import Diagnosis, GeneratedAnswer
from livestock_ai.models.schemas import AnswerRequest, DiagnoseRequest, ErrorDetail
from livestock_ai.services.answer_generator import AnswerGenerator
from livestock_ai.services.chunk_service import get_corpus
from livestock_ai.services.diagnostic_engine import DiagnosticEngine
from livestock_ai.services.provider import GenAIProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/assistant", tags=["assistant"])


# --- Dependencies ---


def get_provider(request: Request) -> GenAIProvider:
    """The process-wide provider created in the app lifespan."""
    return request.app.state.provider


def get_answer_generator(
    provider: GenAIProvider = Depends(get_provider),
) -> AnswerGenerator:
    return AnswerGenerator(provider, settings)


def get_diagnostic_engine(
    provider: GenAIProvider = Depends(get_provider),
) -> DiagnosticEngine:
    return DiagnosticEngine(provider, settings)


def _http_error(e: AssistantError) -> HTTPException:
    if isinstance(e, ValidationError):
        status_code = 422
    elif isinstance(e, ProviderError):
        status_code = 502
    else:
        status_code = 500
    return HTTPException(
        status_code=status_code,
        detail=ErrorDetail(code=e.code, message=e.message).model_dump(),
    )


# --- Endpoints ---


@router.post("/answer", response_model=GeneratedAnswer)
async def answer_question(
    body: AnswerRequest,
    session: AsyncSession = Depends(get_session),
    generator: AnswerGenerator = Depends(get_answer_generator),
) -> GeneratedAnswer:
    corpus = await get_corpus(session)
    logger.info("Answer request over %d chunks (top_k=%d)", len(corpus), body.top_k)
    try:
        return await generator.generate_answer(body.question, corpus, body.top_k)
    except ValidationError as e:
        raise _http_error(e)
    except (ProviderError, AnswerGenerationError) as e:
        logger.exception("Answer generation failed")
        raise _http_error(e)


@router.post("/diagnose", response_model=Diagnosis)
async def diagnose_symptoms(
    body: DiagnoseRequest,
    session: AsyncSession = Depends(get_session),
    engine: DiagnosticEngine = Depends(get_diagnostic_engine),
) -> Diagnosis:
    corpus = await get_corpus(session)
    logger.info("Diagnose request: %d symptoms over %d chunks", len(body.symptoms), len(corpus))
    try:
        return await engine.diagnose(body.symptoms, corpus)
    except ValidationError as e:
        raise _http_error(e)
    except ProviderError as e:
        logger.exception("Diagnosis failed")
        raise _http_error(e)
