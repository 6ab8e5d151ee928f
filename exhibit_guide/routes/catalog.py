"""Catalog item listing, lookup and creation."""

from fastapi import APIRouter, Depends, HTTPException

from exhibit_guide.storage import PersistenceError, Storage

from .deps import get_storage
from .models import CreateItem

router = APIRouter()


@router.get("/items")
async def list_items(storage: Storage = Depends(get_storage)):
    """List all catalog items ordered by id."""
    return storage.list_items()


@router.get("/items/{item_id}")
async def get_item(item_id: int, storage: Storage = Depends(get_storage)):
    """Get a single catalog item, including its generated content."""
    item = storage.get_item(item_id)
    if not item:
        raise HTTPException(404, "Catalog item not found")
    return item


@router.post("/items", status_code=201)
async def create_item(body: CreateItem, storage: Storage = Depends(get_storage)):
    """Add an item to the catalog."""
    fields = body.model_dump(exclude_none=True)
    try:
        return storage.create_item(**fields)
    except PersistenceError as e:
        raise HTTPException(500, str(e))
