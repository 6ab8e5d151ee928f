"""LLM content endpoints: generate-or-retrieve, populate one item, backfill all."""

from fastapi import APIRouter, Depends, HTTPException

from exhibit_guide.config import Settings
from exhibit_guide.generation import ContentGenerator, ItemNotFoundError, run_backfill
from exhibit_guide.llm import ChatProvider, ConfigurationError, ProviderError, ResponseFormatError
from exhibit_guide.storage import PersistenceError, Storage

from .deps import get_generator, get_provider, get_settings, get_storage
from .models import GenerateContentBody, PopulateBody

router = APIRouter(prefix="/llm")


def _error(status_code: int, message: str) -> HTTPException:
    return HTTPException(status_code, {"error": message, "status_code": status_code})


@router.post("/generate-content")
async def generate_content(
    body: GenerateContentBody,
    generator: ContentGenerator = Depends(get_generator),
):
    """Serve a cached description or generate content for an item."""
    try:
        return await generator.generate(
            player_id=body.player_id,
            item_id=body.item_id,
            content_type=body.content_type,
            specific_request=body.specific_request,
            conversation_history=body.conversation_history,
        )
    except ItemNotFoundError:
        raise HTTPException(404, "Catalog item not found")
    except ConfigurationError as e:
        raise HTTPException(500, str(e))
    except ProviderError as e:
        raise _error(e.status_code, e.message)
    except ResponseFormatError as e:
        raise _error(500, e.reason)
    except PersistenceError as e:
        raise _error(500, f"Error saving generated content: {e}")


@router.post("/populate-object")
async def populate_object(
    body: PopulateBody,
    generator: ContentGenerator = Depends(get_generator),
):
    """Generate description, story and facts for one item."""
    try:
        report = await generator.populate_item(body.item_id)
    except ItemNotFoundError:
        raise HTTPException(404, "Catalog item not found")
    except ConfigurationError as e:
        raise HTTPException(500, str(e))
    except PersistenceError as e:
        raise HTTPException(500, f"Error populating item: {e}")
    return {"message": "Item populated successfully", **report.model_dump()}


@router.post("/populate-all-descriptions")
async def populate_all_descriptions(
    storage: Storage = Depends(get_storage),
    provider: ChatProvider = Depends(get_provider),
    settings: Settings = Depends(get_settings),
):
    """Backfill generated descriptions for every item missing one."""
    try:
        return await run_backfill(
            catalog=storage,
            provider=provider,
            delay=settings.backfill_delay,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
        )
    except ConfigurationError as e:
        raise HTTPException(500, str(e))
