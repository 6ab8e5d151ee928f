"""Generation orchestrator — serves or synthesizes content for one item.

Request flow:
  1. Load the item; unknown id → ItemNotFoundError.
  2. Cache check: a "description" request for an item that already has a
     generated description is answered from the catalog and audited as a
     retrieval. No provider call, no catalog write.
  3. Otherwise build the message list and call the provider.
  4. Descriptions are written back to the catalog (write-through fill).
  5. Audit the generation, best-effort, and respond.

Failed provider calls are audited too (was_successful=False) before the
error propagates, so provider outages show up in the interaction log.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from exhibit_guide.audit import AuditTrail, generation_record, retrieval_record
from exhibit_guide.llm import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    ChatProvider,
    ConfigurationError,
    ProviderError,
    ResponseFormatError,
)
from exhibit_guide.models import (
    CatalogItem,
    ContentType,
    ConversationMessage,
    GenerationResult,
    PopulateReport,
    utcnow,
)
from exhibit_guide.prompts import build_messages
from exhibit_guide.storage import AuditLog, CatalogStore

logger = logging.getLogger(__name__)

POPULATE_MAX_TOKENS = 300

# Slots filled by populate_item, in call order.
POPULATE_FIELDS: tuple[tuple[ContentType, str], ...] = (
    (ContentType.DESCRIPTION, "generated_description"),
    (ContentType.STORY, "generated_story"),
    (ContentType.FACTS, "generated_facts"),
)


class ItemNotFoundError(LookupError):
    """No catalog item exists with the requested id."""

    def __init__(self, item_id: int) -> None:
        super().__init__(f"Catalog item {item_id} not found")
        self.item_id = item_id


class ContentGenerator:
    """Cache-aware content generation for catalog items.

    Args:
        catalog:             Where items are read from and written back to.
        audit_log:           Append-only sink for interaction records.
        provider:            Chat-completion provider.
        max_tokens:          Budget for single generate() calls.
        populate_max_tokens: Budget for each of the three populate_item() calls.
        temperature:         Sampling temperature for every call.
    """

    def __init__(
        self,
        catalog: CatalogStore,
        audit_log: AuditLog,
        provider: ChatProvider,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        populate_max_tokens: int = POPULATE_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> None:
        self._catalog = catalog
        self._audit = AuditTrail(audit_log)
        self._provider = provider
        self._max_tokens = max_tokens
        self._populate_max_tokens = populate_max_tokens
        self._temperature = temperature

    def _load(self, item_id: int) -> CatalogItem:
        item = self._catalog.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def _require_provider(self) -> None:
        if not self._provider.configured:
            raise ConfigurationError("LLM provider API key is not configured")

    async def generate(
        self,
        player_id: str,
        item_id: int,
        content_type: str,
        specific_request: str | None = None,
        conversation_history: Sequence[ConversationMessage] | None = None,
    ) -> GenerationResult:
        """Return cached or freshly generated content for an item.

        `content_type` is echoed back as given; unknown values are generated
        with the generic "other" instructions.
        """
        item = self._load(item_id)
        kind = ContentType.parse(content_type)

        if kind is ContentType.DESCRIPTION and item.has_generated_description:
            logger.info("description cache hit item=%s player=%s", item.id, player_id)
            self._audit.record(retrieval_record, player_id, item, content_type)
            return GenerationResult(content=item.generated_description, content_type=content_type)

        self._require_provider()
        messages = build_messages(item, kind, specific_request, conversation_history)
        user_prompt = messages[-1]["content"]

        started = time.monotonic()
        try:
            completion = await self._provider.complete(
                messages, max_tokens=self._max_tokens, temperature=self._temperature,
            )
        except (ProviderError, ResponseFormatError) as e:
            logger.warning("generation failed item=%s type=%s: %s", item.id, kind.value, e)
            self._audit.record(
                generation_record,
                player_id, item.id, content_type, specific_request, user_prompt, str(e),
                duration_ms=_elapsed_ms(started), success=False,
            )
            raise
        duration_ms = _elapsed_ms(started)

        if kind is ContentType.DESCRIPTION:
            item.generated_description = completion.text
            item.updated_at = utcnow()
            self._catalog.save_item(item)

        logger.info(
            "generated item=%s type=%s tokens=%s duration_ms=%d",
            item.id, kind.value, completion.token_count, duration_ms,
        )
        self._audit.record(
            generation_record,
            player_id, item.id, content_type, specific_request, user_prompt, completion.text,
            tokens=completion.token_count, duration_ms=duration_ms,
        )
        return GenerationResult(content=completion.text, content_type=content_type)

    async def populate_item(self, item_id: int) -> PopulateReport:
        """Generate description, story and facts for one item in sequence.

        A field whose provider call fails is left as it was. The item is
        saved once at the end; only that write can fail the operation.
        """
        item = self._load(item_id)
        self._require_provider()

        report = PopulateReport(item_id=item.id)
        for kind, field in POPULATE_FIELDS:
            messages = build_messages(item, kind)
            try:
                completion = await self._provider.complete(
                    messages, max_tokens=self._populate_max_tokens, temperature=self._temperature,
                )
            except (ProviderError, ResponseFormatError) as e:
                logger.warning("populate skipped item=%s type=%s: %s", item.id, kind.value, e)
                report.skipped.append(kind.value)
                continue
            setattr(item, field, completion.text)
            report.generated.append(kind.value)

        item.updated_at = utcnow()
        self._catalog.save_item(item)
        logger.info("populated item=%s generated=%s skipped=%s", item.id, report.generated, report.skipped)
        return report


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
