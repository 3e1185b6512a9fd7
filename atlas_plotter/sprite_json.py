"""JSON documents exchanged with the game engine."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .sprite_collection import SpriteItemCollection
from .sprite_data import SpriteDataError, SpriteItem

logger = logging.getLogger(__name__)

JSON_INDENT = 2


def collection_to_dict(collection: SpriteItemCollection) -> Dict[str, Any]:
    selected = collection.selected_item
    return {
        "Items": [sprite.to_dict() for sprite in collection.items],
        "SelectedItem": selected.to_dict() if selected is not None else None,
    }


def dumps_collection(collection: SpriteItemCollection) -> str:
    return json.dumps(collection_to_dict(collection), indent=JSON_INDENT)


def dumps_sprite(sprite: SpriteItem) -> str:
    return json.dumps(sprite.to_dict(), indent=JSON_INDENT)


def parse_document(text: str) -> Tuple[List[SpriteItem], int | None]:
    """Return the sprites of a document and the id of its selected sprite.

    A document with an ``Items`` array is a whole collection; any other object
    is imported as a single sprite.
    """

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SpriteDataError(f"Invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise SpriteDataError("Document root must be an object")
    lowered = {str(key).lower(): value for key, value in payload.items()}
    if "items" not in lowered:
        sprite = SpriteItem.from_dict(payload)
        logger.debug("Parsed single sprite document id=%s", sprite.id)
        return [sprite], sprite.id

    raw_items = lowered["items"] or []
    if not isinstance(raw_items, list):
        raise SpriteDataError("Items must be a list")
    sprites = [SpriteItem.from_dict(entry, f"Items[{index}]") for index, entry in enumerate(raw_items)]
    selected_id: int | None = None
    raw_selected = lowered.get("selecteditem")
    if isinstance(raw_selected, dict):
        selected_id = SpriteItem.from_dict(raw_selected, "SelectedItem").id
    logger.debug("Parsed collection document items=%s selected=%s", len(sprites), selected_id)
    return sprites, selected_id


def load_collection(path: Path) -> SpriteItemCollection:
    sprites, selected_id = parse_document(path.read_text(encoding="utf-8"))
    return SpriteItemCollection.from_items(sprites, selected_id)


def save_collection(collection: SpriteItemCollection, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_collection(collection), encoding="utf-8")
    logger.debug("Saved collection path=%s items=%s", path, len(collection))
