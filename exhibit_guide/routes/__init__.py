"""FastAPI API endpoints under /api.

Endpoint groups: health, catalog items, and LLM content (generate-or-retrieve,
populate one item, backfill all descriptions).
"""

from fastapi import APIRouter

from .catalog import router as catalog_router
from .generation import router as generation_router
from .health import router as health_router

router = APIRouter()
router.include_router(health_router)
router.include_router(catalog_router)
router.include_router(generation_router)
