"""Test fixtures and configuration."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from livestock_ai.config import Settings
from livestock_ai.database import get_session
from livestock_ai.errors import ProviderError
from livestock_ai.main import app
from livestock_ai.models.orm import Base, KnowledgeChunk
from livestock_ai.models.rag import GenerationRequest, TextChunk
from livestock_ai.routers.assistant import get_provider

test_engine = create_async_engine("sqlite+aiosqlite://", echo=False)
test_session_factory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


async def override_get_session() -> AsyncIterator[AsyncSession]:
    async with test_session_factory() as session:
        yield session


app.dependency_overrides[get_session] = override_get_session

QUERY_VECTOR = [1.0, 0.0, 0.0]

VALID_DIAGNOSIS_TEXT = """\
DISEASE: Bovine Respiratory Disease
CONFIDENCE: High
EXPLANATION: Fever with nasal discharge and laboured breathing matches BRD.
Stress after transport is a common trigger.
TREATMENT: Broad-spectrum antibiotics and anti-inflammatories under veterinary guidance."""


class FakeProvider:
    """Deterministic stand-in for ``GenAIProvider``.

    Every text embeds to ``QUERY_VECTOR``. ``completion`` is returned from
    ``generate`` unless ``generate_error`` is set.
    """

    def __init__(self) -> None:
        self.query_vector = list(QUERY_VECTOR)
        self.completion = "  Keep the calf warm and call your veterinarian.  "
        self.embed_error: ProviderError | None = None
        self.generate_error: ProviderError | None = None
        self.embedded: list[str] = []
        self.requests: list[GenerationRequest] = []

    async def embed(self, text: str) -> list[float]:
        self.embedded.append(text)
        if self.embed_error is not None:
            raise self.embed_error
        return list(self.query_vector)

    async def generate(self, request: GenerationRequest) -> str:
        self.requests.append(request)
        if self.generate_error is not None:
            raise self.generate_error
        return self.completion


def make_chunk(
    chunk_id: str,
    embedding: list[float],
    text: str | None = None,
    source_document_id: str = "doc-1",
) -> TextChunk:
    return TextChunk(
        id=chunk_id,
        text=text if text is not None else f"Knowledge chunk {chunk_id}",
        embedding=embedding,
        source_document_id=source_document_id,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def failing_generation(fake_provider: FakeProvider) -> FakeProvider:
    fake_provider.generate_error = ProviderError(
        "Generation failed: ServerError 503: overloaded", stage="generate"
    )
    return fake_provider


@pytest.fixture
def corpus() -> list[TextChunk]:
    """Four chunks scoring 1.0, 0.6, 0.0 and -1.0 against QUERY_VECTOR."""
    return [
        make_chunk("c-perfect", [1.0, 0.0, 0.0], text="Pneumonia in calves " * 20),
        make_chunk("c-close", [0.6, 0.8, 0.0], text="Shipping fever management."),
        make_chunk("c-orthogonal", [0.0, 1.0, 0.0]),
        make_chunk("c-opposite", [-1.0, 0.0, 0.0]),
    ]


@pytest.fixture(autouse=True)
async def setup_database() -> AsyncIterator[None]:
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def override_provider(fake_provider: FakeProvider) -> Iterator[FakeProvider]:
    app.dependency_overrides[get_provider] = lambda: fake_provider
    yield fake_provider
    app.dependency_overrides.pop(get_provider, None)


@pytest.fixture
async def client(override_provider: FakeProvider) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def seed_chunks() -> list[KnowledgeChunk]:
    async with test_session_factory() as session:
        rows = [
            KnowledgeChunk(
                text="Bovine respiratory disease presents with fever and nasal discharge.",
                embedding=[1.0, 0.0, 0.0],
                source_document_id="brd-guide",
            ),
            KnowledgeChunk(
                text="Foot rot causes lameness and swelling between the claws.",
                embedding=[0.0, 1.0, 0.0],
                source_document_id="hoof-care",
            ),
        ]
        session.add_all(rows)
        await session.commit()
        for row in rows:
            await session.refresh(row)
        return rows


@pytest.fixture
def chunk_factory():
    return make_chunk


@pytest.fixture
def valid_diagnosis_text() -> str:
    return VALID_DIAGNOSIS_TEXT


@pytest.fixture
async def session() -> AsyncIterator[AsyncSession]:
    async with test_session_factory() as session:
        yield session
