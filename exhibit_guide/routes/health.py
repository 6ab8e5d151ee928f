"""Health check endpoint."""

from fastapi import APIRouter, Depends

from exhibit_guide.llm import ChatProvider

from .deps import get_provider

router = APIRouter()


@router.get("/health")
async def health(provider: ChatProvider = Depends(get_provider)):
    """Health check, including whether a provider credential is configured."""
    return {"status": "ok", "provider_configured": provider.configured}
