"""Read-only access to the knowledge chunk store."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from livestock_ai.models.orm import KnowledgeChunk
from livestock_ai.models.rag import TextChunk


def to_text_chunk(row: KnowledgeChunk) -> TextChunk:
    return TextChunk(
        id=str(row.id),
        text=row.text,
        embedding=row.embedding,
        source_document_id=row.source_document_id,
    )


async def get_corpus(session: AsyncSession) -> list[TextChunk]:
    """Load every chunk in insertion order so retrieval is reproducible."""
    result = await session.execute(select(KnowledgeChunk).order_by(KnowledgeChunk.id))
    return [to_text_chunk(row) for row in result.scalars().all()]
