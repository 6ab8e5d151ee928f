"""Batch backfill — fill in missing descriptions across the whole catalog.

Items are processed one at a time with a fixed pause between them to stay
under the provider's rate limit. A failing item is counted and skipped; it
never stops the run.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from exhibit_guide.llm import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, ChatProvider, ConfigurationError
from exhibit_guide.models import BackfillReport, ContentType, utcnow
from exhibit_guide.prompts import build_messages
from exhibit_guide.storage import CatalogStore

logger = logging.getLogger(__name__)

DEFAULT_DELAY = 1.0


async def run_backfill(
    *,
    catalog: CatalogStore,
    provider: ChatProvider,
    delay: float = DEFAULT_DELAY,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    temperature: float = DEFAULT_TEMPERATURE,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> BackfillReport:
    """Generate a description for every item that lacks one."""
    if not provider.configured:
        raise ConfigurationError("LLM provider API key is not configured")

    items = catalog.list_items_missing_description()
    if not items:
        return BackfillReport(message="All catalog items already have generated descriptions")

    logger.info("backfill started items=%d", len(items))
    report = BackfillReport(message="Description generation complete")

    for index, item in enumerate(items):
        if index:
            await sleep(delay)
        report.processed += 1
        try:
            messages = build_messages(item, ContentType.DESCRIPTION)
            completion = await provider.complete(
                messages, max_tokens=max_tokens, temperature=temperature,
            )
            item.generated_description = completion.text
            item.updated_at = utcnow()
            catalog.save_item(item)
        except Exception as e:
            report.failed += 1
            logger.warning("backfill failed item=%s: %s", item.id, e, exc_info=True)
            continue
        report.successful += 1
        logger.debug("backfill filled item=%s", item.id)

    logger.info(
        "backfill finished processed=%d successful=%d failed=%d",
        report.processed, report.successful, report.failed,
    )
    return report
