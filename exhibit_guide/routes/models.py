"""Pydantic request/response models for API endpoints."""

from pydantic import BaseModel, Field

from exhibit_guide.models import ConversationMessage


class GenerateContentBody(BaseModel):
    player_id: str = Field(min_length=1, max_length=64)
    item_id: int
    content_type: str  # "description" | "story" | "facts" | "conversation" | anything else
    specific_request: str | None = None
    conversation_history: list[ConversationMessage] | None = None


class PopulateBody(BaseModel):
    item_id: int


class CreateItem(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    type: str = Field(min_length=1, max_length=100)
    category: str | None = None
    era: str | None = None
    manufacturer: str | None = None
    description: str | None = None
    status: str | None = None
    image_url: str | None = None
    generated_description: str | None = None
    generated_story: str | None = None
    generated_facts: str | None = None
