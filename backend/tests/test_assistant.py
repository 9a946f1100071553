"""Assistant endpoint tests."""

from __future__ import annotations

from httpx import AsyncClient

from livestock_ai.errors import ProviderError
from livestock_ai.services.answer_generator import INSUFFICIENT_INFORMATION_ANSWER


async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


# --- /answer ---


async def test_answer_success(client: AsyncClient, seed_chunks, override_provider) -> None:
    response = await client.post(
        "/api/v1/assistant/answer",
        json={"question": "What causes fever in cattle?", "topK": 1},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["answer"] == "Keep the calf warm and call your veterinarian."
    assert data["provenance"] == "model"
    assert len(data["sources"]) == 1
    source = data["sources"][0]
    assert source["chunkId"] == str(seed_chunks[0].id)
    assert source["textPreview"].endswith("...")
    assert source["similarity"] == 1.0


async def test_answer_without_chunks(client: AsyncClient, override_provider) -> None:
    response = await client.post(
        "/api/v1/assistant/answer", json={"question": "What causes fever?"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["answer"] == INSUFFICIENT_INFORMATION_ANSWER
    assert data["sources"] == []
    assert override_provider.requests == []


async def test_answer_blank_question(client: AsyncClient) -> None:
    response = await client.post("/api/v1/assistant/answer", json={"question": "  "})
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "INVALID_INPUT"


async def test_answer_degrades_on_generation_failure(
    client: AsyncClient, seed_chunks, override_provider
) -> None:
    override_provider.generate_error = ProviderError("Generation failed", stage="generate")
    response = await client.post(
        "/api/v1/assistant/answer", json={"question": "What causes fever?"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["provenance"] == "heuristic"
    assert "qualified veterinarian" in data["answer"]


async def test_answer_embedding_failure(
    client: AsyncClient, seed_chunks, override_provider
) -> None:
    override_provider.embed_error = ProviderError(
        "Embedding failed: HTTP 403 from embedding endpoint", stage="embed"
    )
    response = await client.post(
        "/api/v1/assistant/answer", json={"question": "What causes fever?"}
    )
    assert response.status_code == 502
    detail = response.json()["detail"]
    assert detail["code"] == "PROVIDER_ERROR"
    assert "HTTP 403" in detail["message"]


# --- /diagnose ---


async def test_diagnose_success(
    client: AsyncClient, seed_chunks, override_provider, valid_diagnosis_text
) -> None:
    override_provider.completion = valid_diagnosis_text
    response = await client.post(
        "/api/v1/assistant/diagnose", json={"symptoms": ["fever", "nasal discharge"]}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["disease"] == "Bovine Respiratory Disease"
    assert data["confidence"] == "High"
    assert data["rawResponse"] == valid_diagnosis_text
    assert data["provenance"] == "model"


async def test_diagnose_fallback(client: AsyncClient, seed_chunks, override_provider) -> None:
    override_provider.generate_error = ProviderError("Generation failed", stage="generate")
    response = await client.post(
        "/api/v1/assistant/diagnose",
        json={"symptoms": ["fever", "respiratory distress"]},
    )
    assert response.status_code == 200
    data = response.json()
    assert "Respiratory" in data["disease"]
    assert data["confidence"] == "Medium"
    assert data["rawResponse"] == ""


async def test_diagnose_no_chunks(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/assistant/diagnose", json={"symptoms": ["fever"]}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["disease"] == "Unknown"
    assert data["treatment"] == "General care"


async def test_diagnose_empty_symptoms(client: AsyncClient) -> None:
    response = await client.post("/api/v1/assistant/diagnose", json={"symptoms": []})
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "INVALID_INPUT"


async def test_diagnose_embedding_failure(
    client: AsyncClient, seed_chunks, override_provider
) -> None:
    override_provider.embed_error = ProviderError("Embedding failed", stage="embed")
    response = await client.post(
        "/api/v1/assistant/diagnose", json={"symptoms": ["fever"]}
    )
    assert response.status_code == 502
