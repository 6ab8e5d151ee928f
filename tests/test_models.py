"""Tests for exhibit_guide.models."""

import pytest
from pydantic import ValidationError

from exhibit_guide.models import (
    LLM_GENERATION,
    MAX_LOGGED_TEXT,
    CatalogItem,
    ContentType,
    InteractionRecord,
    truncate_text,
)


class TestContentType:
    def test_known_values(self) -> None:
        assert ContentType.parse("description") is ContentType.DESCRIPTION
        assert ContentType.parse("story") is ContentType.STORY
        assert ContentType.parse("facts") is ContentType.FACTS
        assert ContentType.parse("conversation") is ContentType.CONVERSATION

    def test_case_insensitive(self) -> None:
        assert ContentType.parse("Description") is ContentType.DESCRIPTION
        assert ContentType.parse(" FACTS ") is ContentType.FACTS

    def test_unknown_falls_back_to_other(self) -> None:
        assert ContentType.parse("haiku") is ContentType.OTHER
        assert ContentType.parse("") is ContentType.OTHER


class TestTruncateText:
    def test_short_text_unchanged(self) -> None:
        assert truncate_text("hello") == "hello"

    def test_exact_limit_unchanged(self) -> None:
        text = "x" * MAX_LOGGED_TEXT
        assert truncate_text(text) == text

    def test_long_text_capped_with_ellipsis(self) -> None:
        result = truncate_text("y" * 2500)
        assert len(result) == MAX_LOGGED_TEXT
        assert result.endswith("...")
        assert result[:-3] == "y" * 1997

    def test_one_over_limit(self) -> None:
        result = truncate_text("z" * (MAX_LOGGED_TEXT + 1))
        assert len(result) == MAX_LOGGED_TEXT
        assert result.endswith("...")

    def test_none_passes_through(self) -> None:
        assert truncate_text(None) is None

    def test_idempotent(self) -> None:
        once = truncate_text("q" * 5000)
        assert truncate_text(once) == once


class TestCatalogItem:
    def test_required_fields(self) -> None:
        item = CatalogItem(id=1, name="Concorde", type="Aircraft")
        assert item.category is None
        assert item.generated_description is None
        assert item.generated_story is None
        assert item.generated_facts is None

    def test_missing_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CatalogItem(id=1, type="Aircraft")

    def test_has_generated_description(self) -> None:
        item = CatalogItem(id=1, name="X", type="Y", generated_description="Sleek.")
        assert item.has_generated_description

    def test_blank_description_is_a_miss(self) -> None:
        assert not CatalogItem(id=1, name="X", type="Y").has_generated_description
        assert not CatalogItem(id=1, name="X", type="Y", generated_description="").has_generated_description
        assert not CatalogItem(id=1, name="X", type="Y", generated_description="  \n").has_generated_description

    def test_serialise_roundtrip(self) -> None:
        item = CatalogItem(id=3, name="Apollo CM", type="Spacecraft", era="Space Age")
        assert CatalogItem.model_validate_json(item.model_dump_json()) == item


class TestInteractionRecord:
    def test_defaults(self) -> None:
        r = InteractionRecord(player_id="p1", item_id=1, interaction_type=LLM_GENERATION)
        assert r.was_successful is True
        assert r.used_llm is False
        assert r.duration_ms == 0
        assert r.llm_prompt is None
        assert r.llm_tokens is None

    def test_prompt_and_response_truncated(self) -> None:
        r = InteractionRecord(
            player_id="p1", item_id=1, interaction_type=LLM_GENERATION,
            llm_prompt="p" * 3000, llm_response="r" * 2001,
        )
        assert len(r.llm_prompt) == MAX_LOGGED_TEXT
        assert r.llm_prompt.endswith("...")
        assert len(r.llm_response) == MAX_LOGGED_TEXT
        assert r.llm_response.endswith("...")

    def test_player_id_length_limit(self) -> None:
        with pytest.raises(ValidationError):
            InteractionRecord(player_id="p" * 65, item_id=1, interaction_type=LLM_GENERATION)
