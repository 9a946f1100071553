"""Application configuration via environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env")

    database_url: str = "sqlite+aiosqlite:///./livestock.db"
    debug: bool = False

    # Google AI (embeddings + generation)
    # Set GOOGLE_API_KEY for API key auth, otherwise uses Vertex AI ADC.
    google_api_key: str = ""
    gcp_project_id: str = "livestock-assistant-dev"
    gcp_location: str = "us-central1"
    embedding_model: str = "text-embedding-005"
    embedding_dimensions: int = 768

    # Open Q&A generation
    answer_model: str = "gemini-2.0-flash"
    answer_max_tokens: int = 650
    answer_temperature: float = 0.85
    answer_top_p: float = 0.92
    answer_frequency_penalty: float = 0.3
    answer_presence_penalty: float = 0.2

    # Diagnosis generation (longer structured output)
    diagnosis_model: str = "gemini-2.0-flash"
    diagnosis_top_k: int = 5
    diagnosis_max_tokens: int = 900
    diagnosis_temperature: float = 0.75
    diagnosis_top_p: float = 0.88
    diagnosis_frequency_penalty: float = 0.4
    diagnosis_presence_penalty: float = 0.3

    # Source previews and degraded answers
    preview_chars: int = 200


settings = Settings()
