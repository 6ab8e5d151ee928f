"""Interaction audit trail.

Audit writes are a best-effort side channel: by the time a record is written
the visitor's content already exists, so a failed write is logged and
reported through the return value but never raised. Records are built inside
the guard too, so a value the log model rejects is treated the same way.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from exhibit_guide.models import (
    DESCRIPTION_RETRIEVAL,
    LLM_GENERATION,
    CatalogItem,
    InteractionRecord,
)
from exhibit_guide.storage import AuditLog

logger = logging.getLogger(__name__)


class AuditTrail:
    def __init__(self, log: AuditLog) -> None:
        self._log = log

    def record(self, build: Callable[..., InteractionRecord], *args: Any, **kwargs: Any) -> bool:
        """Build a record with `build(*args, **kwargs)` and append it.

        Returns False if the record could not be built or the store rejected it.
        """
        try:
            self._log.append_interaction(build(*args, **kwargs))
        except Exception as e:
            logger.warning(
                "Failed to save interaction log via %s: %s",
                getattr(build, "__name__", build), e, exc_info=True,
            )
            return False
        return True


def retrieval_record(player_id: str, item: CatalogItem, content_type: str) -> InteractionRecord:
    """A cached description was served from the catalog."""
    return InteractionRecord(
        player_id=player_id,
        item_id=item.id,
        interaction_type=DESCRIPTION_RETRIEVAL,
        interaction_data={"content_type": content_type, "source": "database"},
        was_successful=True,
        used_llm=False,
        llm_response=item.generated_description,
    )


def generation_record(
    player_id: str,
    item_id: int,
    content_type: str,
    specific_request: str | None,
    prompt: str,
    response: str,
    *,
    tokens: int | None = None,
    duration_ms: int = 0,
    success: bool = True,
) -> InteractionRecord:
    """A provider call was made; `response` is the error text when it failed."""
    return InteractionRecord(
        player_id=player_id,
        item_id=item_id,
        interaction_type=LLM_GENERATION,
        interaction_data={"content_type": content_type, "specific_request": specific_request},
        duration_ms=duration_ms,
        was_successful=success,
        used_llm=True,
        llm_prompt=prompt,
        llm_response=response,
        llm_tokens=tokens,
    )
