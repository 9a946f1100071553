"""Model provider: query embeddings and chat generation via Google GenAI."""

from __future__ import annotations

import logging

import httpx
from google import genai
from google.auth.exceptions import GoogleAuthError
from google.genai import errors as genai_errors
from google.genai import types

from livestock_ai.config import Settings
from livestock_ai.errors import ProviderError
from livestock_ai.models.rag import GenerationOutcome, GenerationRequest

logger = logging.getLogger(__name__)

_VERTEX_PREDICT_URL = (
    "https://{location}-aiplatform.googleapis.com/v1/projects/{project}"
    "/locations/{location}/publishers/google/models/{model}:predict"
)

# GenAI uses "model" for assistant turns.
_GENAI_ROLES = {"user": "user", "assistant": "model"}


def _describe(exc: Exception) -> str:
    """Summarize a provider exception without leaking keys or request URLs."""
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code} from embedding endpoint"
    if isinstance(exc, httpx.HTTPError):
        return f"{type(exc).__name__} contacting embedding endpoint"
    if isinstance(exc, genai_errors.APIError):
        return f"{type(exc).__name__} {exc.code}: {exc.message}"
    return f"{type(exc).__name__}: {exc}"


class GenAIProvider:
    """Embedding and generation client handle.

    Construct once per process and share it. The underlying
    ``genai.Client`` is created on first use and reused thereafter.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._client: genai.Client | None = None

    @property
    def client(self) -> genai.Client:
        """Get or create the Google GenAI client."""
        if self._client is None:
            if self.settings.google_api_key:
                self._client = genai.Client(
                    vertexai=True, api_key=self.settings.google_api_key
                )
            else:
                self._client = genai.Client(
                    vertexai=True,
                    project=self.settings.gcp_project_id,
                    location=self.settings.gcp_location,
                )
            logger.info("Created GenAI client (api_key=%s)", bool(self.settings.google_api_key))
        return self._client

    # --- Embedding ---

    async def _embed_via_api_key(self, text: str) -> list[float]:
        """Call the Vertex AI embedding endpoint directly using a GCP API key."""
        url = _VERTEX_PREDICT_URL.format(
            location=self.settings.gcp_location,
            project=self.settings.gcp_project_id,
            model=self.settings.embedding_model,
        )
        body = {
            "instances": [{"content": text, "task_type": "RETRIEVAL_QUERY"}],
            "parameters": {"outputDimensionality": self.settings.embedding_dimensions},
        }
        async with httpx.AsyncClient() as client:
            resp = await client.post(
                url, params={"key": self.settings.google_api_key}, json=body, timeout=30
            )
        resp.raise_for_status()
        return resp.json()["predictions"][0]["embeddings"]["values"]

    async def embed(self, text: str) -> list[float]:
        """Embed a single query text. Raises ``ProviderError(stage="embed")``."""
        logger.debug(
            "Embedding query (%d chars): %r",
            len(text),
            text[:100] + ("..." if len(text) > 100 else ""),
        )
        try:
            if self.settings.google_api_key:
                vector = await self._embed_via_api_key(text)
            else:
                response = await self.client.aio.models.embed_content(
                    model=self.settings.embedding_model,
                    contents=[text],
                    config=types.EmbedContentConfig(
                        output_dimensionality=self.settings.embedding_dimensions,
                        task_type="RETRIEVAL_QUERY",
                    ),
                )
                vector = list(response.embeddings[0].values)
        except (
            httpx.HTTPError,
            genai_errors.APIError,
            GoogleAuthError,
            KeyError,
            IndexError,
            TypeError,
            ValueError,
        ) as e:
            raise ProviderError(f"Embedding failed: {_describe(e)}", stage="embed") from e

        logger.debug("Embedded query -> %d-dim vector", len(vector))
        return [float(v) for v in vector]

    # --- Generation ---

    async def generate(self, request: GenerationRequest) -> str:
        """Run one chat completion. Raises ``ProviderError(stage="generate")``."""
        system = "\n\n".join(m.content for m in request.messages if m.role == "system")
        contents = [
            types.Content(role=_GENAI_ROLES[m.role], parts=[types.Part(text=m.content)])
            for m in request.messages
            if m.role != "system"
        ]
        sampling = request.sampling
        config = types.GenerateContentConfig(
            system_instruction=system or None,
            max_output_tokens=sampling.max_tokens,
            temperature=sampling.temperature,
            top_p=sampling.top_p,
            frequency_penalty=sampling.frequency_penalty,
            presence_penalty=sampling.presence_penalty,
        )

        logger.info(
            "Generating: model=%s max_tokens=%d temperature=%.2f messages=%d",
            request.model,
            sampling.max_tokens,
            sampling.temperature,
            len(request.messages),
        )
        try:
            response = await self.client.aio.models.generate_content(
                model=request.model,
                contents=contents,
                config=config,
            )
        except Exception as e:
            # Transport failures vary with the SDK's HTTP backend (httpx or aiohttp).
            raise ProviderError(f"Generation failed: {_describe(e)}", stage="generate") from e

        text = response.text
        if not text or not text.strip():
            raise ProviderError("Generation returned an empty completion", stage="generate")
        logger.debug("Generated %d chars", len(text))
        return text


async def attempt_generation(
    provider: GenAIProvider, request: GenerationRequest
) -> GenerationOutcome:
    """Run one generation with no retry, tagging where the outcome came from.

    A generation-stage ``ProviderError`` yields a ``heuristic`` outcome so the
    caller can take its degraded path. Embedding errors never reach here.
    """
    try:
        text = await provider.generate(request)
    except ProviderError as e:
        logger.warning("Generation unavailable, using heuristic path: %s", e.message)
        return GenerationOutcome(provenance="heuristic", error=e.message)
    if not text.strip():
        logger.warning("Generation returned blank text, using heuristic path")
        return GenerationOutcome(provenance="heuristic", error="blank completion")
    return GenerationOutcome(provenance="model", text=text.strip())
