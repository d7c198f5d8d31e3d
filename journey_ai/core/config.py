from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    project_name: str = "Journey AI"
    api_v1_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Build-time credentials. When set they win over anything saved through the settings API.
    gemini_api_key: str = Field(default="", description="Injected Gemini API key")
    serp_api_key: str = Field(default="", description="Injected SerpApi key for flight search")

    llm_provider: Literal["gemini", "openai"] = "gemini"
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    openai_model: str = "gpt-4.1-mini"
    llm_timeout_seconds: float | None = None

    plan_temperature: float = 0.7
    plan_max_output_tokens: int = 8192
    chat_temperature: float = 0.7
    chat_max_output_tokens: int = 2048

    flight_provider: Literal["static", "serpapi"] = "static"
    serpapi_base_url: str = "https://serpapi.com/search.json"
    flight_currency: str = "USD"

    settings_store_path: str = ".journey_ai/settings.json"

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[arg-type]


settings = get_settings()
