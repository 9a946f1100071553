"""SQLAlchemy ORM models."""

from __future__ import annotations

import datetime

from sqlalchemy import JSON, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class KnowledgeChunk(Base):
    """A pre-embedded knowledge-base chunk, written by the ingestion pipeline."""

    __tablename__ = "knowledge_chunks"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    text: Mapped[str] = mapped_column(Text)
    embedding: Mapped[list] = mapped_column(JSON)
    source_document_id: Mapped[str] = mapped_column(String(200), index=True)
    created_at: Mapped[datetime.datetime] = mapped_column(server_default=func.now())
