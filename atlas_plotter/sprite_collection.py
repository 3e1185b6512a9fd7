"""Ordered sprite collection with selection and marker colors."""
from __future__ import annotations

import logging
import random
from typing import Dict, Iterable, Iterator, List, Sequence, Set

from PySide6.QtCore import QObject, Signal

from .sprite_data import ColorTuple, SpriteItem

logger = logging.getLogger(__name__)

FIRST_SPRITE_ID_FLOOR = 1000
FALLBACK_COLOR: ColorTuple = (255, 0, 0)
_COLOR_CHANNEL_MIN = 100
_COLOR_CHANNEL_MAX = 255


class SpriteItemCollection(QObject):
    """Sprites of one atlas document, in display and save order.

    The ``*_internal`` mutators change state without touching the undo history;
    commands call them. The selection is stored as a sprite id and resolved
    against the current items, so it never outlives a removal.
    """

    selection_changed = Signal(object)  # SpriteItem | None
    item_inserted = Signal(object, int)
    item_removed = Signal(object, int)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        seed_default: bool = False,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(parent)
        self._items: List[SpriteItem] = []
        self._selected_id: int | None = None
        self._item_colors: Dict[int, ColorTuple] = {}
        self._highest_id = FIRST_SPRITE_ID_FLOOR
        self._rng = rng or random.Random()
        if seed_default:
            self.add_new_item_internal()

    @classmethod
    def from_items(
        cls,
        sprites: Iterable[SpriteItem],
        selected_id: int | None = None,
        *,
        parent: QObject | None = None,
        rng: random.Random | None = None,
    ) -> "SpriteItemCollection":
        collection = cls(parent, rng=rng)
        sprites = list(sprites)
        collection._highest_id = max(
            [FIRST_SPRITE_ID_FLOOR] + [sprite.id for sprite in sprites if sprite.id > 0]
        )
        seen_ids: Set[int] = set()
        for sprite in sprites:
            # ids are unique per collection; missing (0) or repeated ones get fresh ids
            if sprite.id <= 0 or sprite.id in seen_ids:
                new_id = collection.next_id()
                logger.debug(
                    "Collection reassigned id=%s to id=%s name=%s", sprite.id, new_id, sprite.name
                )
                sprite.id = new_id
                collection._highest_id = new_id
            seen_ids.add(sprite.id)
            collection._assign_color(sprite.id)
            collection._items.append(sprite)
        if selected_id is not None and collection.find_by_id(selected_id) is not None:
            collection._selected_id = selected_id
        elif collection._items:
            collection._selected_id = collection._items[0].id
        logger.debug(
            "Collection built items=%s selected=%s", len(collection._items), collection._selected_id
        )
        return collection

    @property
    def items(self) -> Sequence[SpriteItem]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[SpriteItem]:
        return iter(list(self._items))

    def __contains__(self, sprite: object) -> bool:
        return self.index_of(sprite) >= 0

    def index_of(self, sprite: object) -> int:
        for index, item in enumerate(self._items):
            if item is sprite:
                return index
        return -1

    def find_by_id(self, sprite_id: int) -> SpriteItem | None:
        for item in self._items:
            if item.id == sprite_id:
                return item
        return None

    @property
    def selected_item(self) -> SpriteItem | None:
        if self._selected_id is None:
            return None
        return self.find_by_id(self._selected_id)

    @selected_item.setter
    def selected_item(self, sprite: SpriteItem | None) -> None:
        if sprite is not None and sprite not in self:
            logger.debug("Selection ignored stale sprite id=%s", sprite.id)
            sprite = None
        self._selected_id = None if sprite is None else sprite.id
        self.selection_changed.emit(sprite)

    def next_id(self) -> int:
        # ids of removed sprites stay reserved so an undo can bring them back
        return self._highest_id + 1

    def get_item_color(self, sprite_id: int) -> ColorTuple:
        return self._item_colors.get(sprite_id, FALLBACK_COLOR)

    def add_new_item_internal(self) -> SpriteItem:
        sprite = SpriteItem.create_default(self.next_id())
        self._assign_color(sprite.id)
        self._items.append(sprite)
        self._highest_id = max(self._highest_id, sprite.id)
        logger.debug("Collection added new sprite id=%s name=%s", sprite.id, sprite.name)
        self.item_inserted.emit(sprite, len(self._items) - 1)
        self.selected_item = sprite
        return sprite

    def add_existing_item_internal(self, sprite: SpriteItem, index: int | None = None) -> None:
        if sprite.id not in self._item_colors:
            self._assign_color(sprite.id)
        self._highest_id = max(self._highest_id, sprite.id)
        if index is not None and 0 <= index <= len(self._items):
            self._items.insert(index, sprite)
        else:
            if index is not None:
                logger.debug("Collection insert index=%s out of range, appending id=%s", index, sprite.id)
            index = len(self._items)
            self._items.append(sprite)
        logger.debug("Collection reinserted sprite id=%s index=%s", sprite.id, index)
        self.item_inserted.emit(sprite, index)
        self.selected_item = sprite

    def remove_item_internal(self, sprite: SpriteItem) -> None:
        index = self.index_of(sprite)
        if index < 0:
            logger.debug("Collection remove skipped, sprite id=%s not present", sprite.id)
            return
        was_selected = self.selected_item is sprite
        del self._items[index]
        logger.debug("Collection removed sprite id=%s index=%s", sprite.id, index)
        self.item_removed.emit(sprite, index)
        if was_selected:
            self.selected_item = self._items[0] if self._items else None

    def _assign_color(self, sprite_id: int) -> ColorTuple:
        color = (
            self._rng.randint(_COLOR_CHANNEL_MIN, _COLOR_CHANNEL_MAX),
            self._rng.randint(_COLOR_CHANNEL_MIN, _COLOR_CHANNEL_MAX),
            self._rng.randint(_COLOR_CHANNEL_MIN, _COLOR_CHANNEL_MAX),
        )
        self._item_colors[sprite_id] = color
        return color
