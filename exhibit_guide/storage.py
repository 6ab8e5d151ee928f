"""Catalog and interaction-log storage.

The generation service depends only on the CatalogStore and AuditLog
protocols. Storage is the bundled implementation: flat JSON files under a
configurable base directory, read and written through plain helper methods.

Directory layout:

    {base}/
      items/
        {id}.json             ← one CatalogItem per file
      interactions.json       ← append-only list of InteractionRecord objects
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from exhibit_guide.models import CatalogItem, InteractionRecord, utcnow


class PersistenceError(RuntimeError):
    """Raised when a store cannot read or write its files."""


class CatalogStore(Protocol):
    def get_item(self, item_id: int) -> CatalogItem | None: ...

    def save_item(self, item: CatalogItem) -> None: ...

    def list_items_missing_description(self) -> list[CatalogItem]: ...


class AuditLog(Protocol):
    def append_interaction(self, record: InteractionRecord) -> InteractionRecord: ...


class Storage:
    def __init__(self, base_path: Path) -> None:
        self._base = base_path
        self._items_dir = base_path / "items"
        self._items_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Internal path helpers
    # ------------------------------------------------------------------

    def _item_file(self, item_id: int) -> Path:
        return self._items_dir / f"{item_id}.json"

    def _interactions_file(self) -> Path:
        return self._base / "interactions.json"

    def _read_json(self, path: Path) -> Any:
        try:
            return json.loads(path.read_text())
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Cannot read {path}: {e}") from e

    def _write_text(self, path: Path, text: str) -> None:
        """Write through a sibling temp file so readers never see a partial file."""
        tmp = path.with_name(path.name + ".tmp")
        try:
            tmp.write_text(text)
            os.replace(tmp, path)
        except OSError as e:
            raise PersistenceError(f"Cannot write {path}: {e}") from e

    # ------------------------------------------------------------------
    # Catalog items
    # ------------------------------------------------------------------

    def list_items(self) -> list[CatalogItem]:
        items = [
            CatalogItem.model_validate_json(path.read_text())
            for path in self._items_dir.glob("*.json")
        ]
        return sorted(items, key=lambda i: i.id)

    def get_item(self, item_id: int) -> CatalogItem | None:
        path = self._item_file(item_id)
        if not path.exists():
            return None
        return CatalogItem.model_validate_json(path.read_text())

    def create_item(self, name: str, type: str, **fields: Any) -> CatalogItem:
        """Create an item with the next free id."""
        next_id = max((i.id for i in self.list_items()), default=0) + 1
        now = utcnow()
        item = CatalogItem(
            id=next_id, name=name, type=type,
            created_at=now, updated_at=now, **fields,
        )
        self.save_item(item)
        return item

    def save_item(self, item: CatalogItem) -> None:
        """Upsert an item by id."""
        self._write_text(self._item_file(item.id), item.model_dump_json(indent=2))

    def list_items_missing_description(self) -> list[CatalogItem]:
        return [i for i in self.list_items() if not i.has_generated_description]

    # ------------------------------------------------------------------
    # Interaction log (append-only)
    # ------------------------------------------------------------------

    def get_interactions(self) -> list[InteractionRecord]:
        path = self._interactions_file()
        if not path.exists():
            return []
        try:
            return [InteractionRecord.model_validate(r) for r in self._read_json(path)]
        except (TypeError, ValidationError) as e:
            raise PersistenceError(f"Corrupt interaction log {path}: {e}") from e

    def append_interaction(self, record: InteractionRecord) -> InteractionRecord:
        """Append a record, assigning it the next sequential id."""
        existing = self.get_interactions()
        stored = record.model_copy(update={"id": len(existing) + 1})
        existing.append(stored)
        self._write_text(
            self._interactions_file(),
            json.dumps([r.model_dump(mode="json") for r in existing], indent=2),
        )
        return stored
