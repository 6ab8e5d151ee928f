"""Application settings, read from the environment (and .env, via python-dotenv)."""

import os
from pathlib import Path

from pydantic import BaseModel

from exhibit_guide.generation.backfill import DEFAULT_DELAY
from exhibit_guide.generation.orchestrator import POPULATE_MAX_TOKENS
from exhibit_guide.llm import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_PROVIDER_URL,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEOUT,
    ChatProvider,
    EchoProvider,
    HttpChatProvider,
)

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"


class Settings(BaseModel):
    api_key: str = ""
    provider_url: str = DEFAULT_PROVIDER_URL
    provider_format: str = "openai"  # "openai" | "echo"
    model: str = DEFAULT_MODEL
    timeout: float = DEFAULT_TIMEOUT
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    populate_max_tokens: int = POPULATE_MAX_TOKENS
    backfill_delay: float = DEFAULT_DELAY
    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables; unset ones keep their defaults."""
        env = {
            "api_key": os.getenv("OPENAI_API_KEY"),
            "provider_url": os.getenv("LLM_PROVIDER_URL"),
            "provider_format": os.getenv("LLM_PROVIDER_FORMAT"),
            "model": os.getenv("LLM_MODEL"),
            "timeout": os.getenv("LLM_TIMEOUT"),
            "temperature": os.getenv("LLM_TEMPERATURE"),
            "max_tokens": os.getenv("LLM_MAX_TOKENS"),
            "populate_max_tokens": os.getenv("LLM_POPULATE_MAX_TOKENS"),
            "backfill_delay": os.getenv("BACKFILL_DELAY"),
            "data_dir": os.getenv("DATA_DIR"),
            "log_level": os.getenv("LOG_LEVEL"),
        }
        return cls.model_validate({k: v for k, v in env.items() if v not in (None, "")})


def build_provider(settings: Settings) -> ChatProvider:
    if settings.provider_format == "echo":
        return EchoProvider()
    return HttpChatProvider(
        api_key=settings.api_key,
        provider_url=settings.provider_url,
        model=settings.model,
        timeout=settings.timeout,
    )
