"""Editing session: the document, its history and the user gestures on it."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, cast

from PySide6.QtCore import QObject, Signal

from .atlas_image import AtlasImage, load_atlas, snap_to_pixel
from .command_manager import CommandManager
from .commands import (
    AddColliderCommand,
    AddSpriteCommand,
    CompositeCommand,
    ModifySpritePropertyCommand,
    RemoveColliderCommand,
    RemoveSpriteCommand,
)
from .events import EditorEvents
from .settings import EditorSettings
from .sprite_collection import SpriteItemCollection
from .sprite_data import DEFAULT_COLLIDER_TYPE, Collider, SpriteItem, SpriteProperty, get_property
from .sprite_json import dumps_collection, dumps_sprite, load_collection, save_collection

logger = logging.getLogger(__name__)


def default_collider() -> Collider:
    return Collider(DEFAULT_COLLIDER_TYPE, 0, 0, 8, 8)


class EditorSession(QObject):
    """Owns the sprite collection and routes every tracked edit through history.

    Replacing the collection (loading a document) or loading a new atlas image
    happens outside the history and clears it.
    """

    collection_replaced = Signal(object)  # SpriteItemCollection

    def __init__(
        self,
        settings: EditorSettings | None = None,
        parent: QObject | None = None,
        *,
        collection: SpriteItemCollection | None = None,
    ) -> None:
        super().__init__(parent)
        self.settings = settings or EditorSettings()
        self.events = EditorEvents(self)
        self.commands = CommandManager(self, max_history=self.settings.max_history)
        if collection is None:
            collection = SpriteItemCollection(seed_default=self.settings.seed_default_sprite)
        self.collection = collection
        self.atlas: AtlasImage | None = None

    @property
    def selected_sprite(self) -> SpriteItem | None:
        return self.collection.selected_item

    def select(self, sprite: SpriteItem | None) -> None:
        self.collection.selected_item = sprite

    def add_sprite(self) -> SpriteItem:
        command = AddSpriteCommand(self.collection, self.events)
        self.commands.execute_command(command)
        return cast(SpriteItem, command.added_sprite)

    def remove_sprite(self, sprite: SpriteItem | None = None) -> bool:
        target = sprite if sprite is not None else self.collection.selected_item
        if target is None or target not in self.collection:
            logger.debug("Remove sprite skipped, nothing to remove")
            return False
        self.commands.execute_command(RemoveSpriteCommand(self.collection, target, self.events))
        return True

    def set_property(self, sprite: SpriteItem, prop: SpriteProperty | str, value: Any) -> bool:
        resolved = SpriteProperty.from_path(prop)
        try:
            new_value = resolved.coerce(value)
        except (TypeError, ValueError) as exc:
            logger.debug("Property edit rejected path=%s value=%r: %s", resolved.path, value, exc)
            return False
        old_value = get_property(sprite, resolved)
        if old_value == new_value:
            return False
        self.commands.execute_command(
            ModifySpritePropertyCommand(sprite, resolved, old_value, new_value, self.events)
        )
        return True

    def set_source_location(self, x: float, y: float) -> bool:
        """Move the selected sprite's source rectangle to the clicked atlas pixel."""
        target = self.collection.selected_item
        if target is None:
            logger.debug("Source move skipped, no sprite selected")
            return False
        pixel_x, pixel_y = snap_to_pixel(x, y)
        steps = []
        for prop, value in ((SpriteProperty.SOURCE_X, pixel_x), (SpriteProperty.SOURCE_Y, pixel_y)):
            old_value = get_property(target, prop)
            if old_value != value:
                steps.append(ModifySpritePropertyCommand(target, prop, old_value, value, self.events))
        if not steps:
            return False
        self.commands.execute_command(CompositeCommand(f"Move Sprite '{target.name}'", steps))
        return True

    def add_collider(self, sprite: SpriteItem | None = None, collider: Collider | None = None) -> Collider | None:
        target = sprite if sprite is not None else self.collection.selected_item
        if target is None:
            logger.debug("Add collider skipped, no sprite selected")
            return None
        collider = collider or default_collider()
        self.commands.execute_command(AddColliderCommand(target, collider, self.events))
        return collider

    def remove_collider(self, collider: Collider, sprite: SpriteItem | None = None) -> bool:
        target = sprite if sprite is not None else self.collection.selected_item
        if target is None or not any(existing is collider for existing in target.colliders):
            logger.debug("Remove collider skipped, collider not on the target sprite")
            return False
        self.commands.execute_command(RemoveColliderCommand(target, collider, self.events))
        return True

    def undo(self) -> bool:
        return self.commands.undo()

    def redo(self) -> bool:
        return self.commands.redo()

    def replace_collection(self, collection: SpriteItemCollection) -> None:
        self.collection = collection
        self.commands.clear_history()
        for sprite in collection.items:
            self.events.sprite_added.emit(sprite)
        logger.debug("Session collection replaced items=%s", len(collection))
        self.collection_replaced.emit(collection)

    def load_document(self, path: Path) -> SpriteItemCollection:
        collection = load_collection(path)
        self.replace_collection(collection)
        return collection

    def save_document(self, path: Path) -> None:
        save_collection(self.collection, path)

    def dump_selected_json(self) -> str | None:
        selected = self.collection.selected_item
        return dumps_sprite(selected) if selected is not None else None

    def dump_all_json(self) -> str:
        return dumps_collection(self.collection)

    def load_atlas(self, path: Path) -> AtlasImage:
        self.atlas = load_atlas(path)
        self.commands.clear_history()
        return self.atlas
