"""Core domain models.

The generation service, the stores and the API layer all operate on these
types. Pydantic is used for validation and serialisation at every data
boundary.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

# Column budget for logged prompt/response text.
MAX_LOGGED_TEXT = 2000
ELLIPSIS = "..."

DESCRIPTION_RETRIEVAL = "Description_Retrieval"
LLM_GENERATION = "LLM_Generation"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def truncate_text(text: str | None, limit: int = MAX_LOGGED_TEXT) -> str | None:
    """Cap text at `limit` characters, marking the cut with an ellipsis.

    "a" * 2500 → "a" * 1997 + "..."
    """
    if text is None or len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


class ContentType(str, Enum):
    """Kinds of generated content an item can be asked for."""

    DESCRIPTION = "description"
    STORY = "story"
    FACTS = "facts"
    CONVERSATION = "conversation"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str) -> ContentType:
        """Case-insensitive lookup; unknown values fall back to OTHER."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.OTHER


class CatalogItem(BaseModel):
    """An exhibit in the catalog, with its three generated-content slots."""

    id: int
    name: str
    type: str
    category: str | None = None
    era: str | None = None
    manufacturer: str | None = None
    description: str | None = None
    status: str | None = None
    image_url: str | None = None
    generated_description: str | None = None
    generated_story: str | None = None
    generated_facts: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def has_generated_description(self) -> bool:
        return bool(self.generated_description and self.generated_description.strip())


class InteractionRecord(BaseModel):
    """One entry in the append-only interaction log."""

    id: int | None = None
    player_id: str = Field(max_length=64)
    item_id: int
    interaction_type: str = Field(max_length=100)
    interaction_data: dict[str, Any] | None = None
    timestamp: datetime = Field(default_factory=utcnow)
    duration_ms: int = 0
    was_successful: bool = True
    used_llm: bool = False
    llm_prompt: str | None = None
    llm_response: str | None = None
    llm_tokens: int | None = None

    @field_validator("llm_prompt", "llm_response")
    @classmethod
    def _fit_column(cls, value: str | None) -> str | None:
        return truncate_text(value)


class ConversationMessage(BaseModel):
    """A prior turn of a visitor conversation. Never persisted."""

    role: str  # "user" | "assistant"; anything else is dropped
    content: str


class Completion(BaseModel):
    """Text returned by the provider plus its reported token usage."""

    text: str
    token_count: int | None = None


class GenerationResult(BaseModel):
    content: str
    content_type: str


class PopulateReport(BaseModel):
    item_id: int
    generated: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)


class BackfillReport(BaseModel):
    message: str
    processed: int = 0
    successful: int = 0
    failed: int = 0
