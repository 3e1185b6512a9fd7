"""Reversible edits applied to a sprite collection through the command manager."""
from __future__ import annotations

import logging
from typing import Any, Iterable, List

from .events import EditorEvents
from .sprite_collection import SpriteItemCollection
from .sprite_data import Collider, SpriteItem, SpriteProperty, set_property

logger = logging.getLogger(__name__)


class Command:
    """Base class for history entries.

    A command is bound to the objects it mutates when it is constructed and
    keeps whatever "before" state it needs to reverse itself.
    """

    def __init__(self, events: EditorEvents | None = None) -> None:
        self._events = events

    @property
    def name(self) -> str:
        raise NotImplementedError

    def execute(self) -> None:
        raise NotImplementedError

    def undo(self) -> None:
        raise NotImplementedError

    def redo(self) -> None:
        self.execute()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


def _restore_selection(collection: SpriteItemCollection, sprite_id: int | None) -> None:
    if sprite_id is None:
        collection.selected_item = None
        return
    sprite = collection.find_by_id(sprite_id)
    if sprite is None:
        logger.debug("Selection restore skipped, sprite id=%s no longer present", sprite_id)
        return
    collection.selected_item = sprite


class AddSpriteCommand(Command):
    def __init__(self, collection: SpriteItemCollection, events: EditorEvents | None = None) -> None:
        super().__init__(events)
        self._collection = collection
        self.added_sprite: SpriteItem | None = None
        self.previous_selection_id: int | None = None

    @property
    def name(self) -> str:
        return "Add Sprite"

    def execute(self) -> None:
        selected = self._collection.selected_item
        self.previous_selection_id = None if selected is None else selected.id
        self.added_sprite = self._collection.add_new_item_internal()
        if self._events is not None:
            self._events.sprite_added.emit(self.added_sprite)

    def undo(self) -> None:
        if self.added_sprite is None:
            return
        self._collection.remove_item_internal(self.added_sprite)
        _restore_selection(self._collection, self.previous_selection_id)
        if self._events is not None:
            self._events.sprite_removed.emit(self.added_sprite)

    def redo(self) -> None:
        # a fresh sprite has no earlier position, so it goes back to the end
        if self.added_sprite is None:
            return
        self._collection.add_existing_item_internal(self.added_sprite)
        if self._events is not None:
            self._events.sprite_added.emit(self.added_sprite)


class RemoveSpriteCommand(Command):
    """Removes a sprite and puts it back at the same position on undo."""

    def __init__(
        self,
        collection: SpriteItemCollection,
        sprite: SpriteItem,
        events: EditorEvents | None = None,
    ) -> None:
        super().__init__(events)
        self._collection = collection
        self.sprite = sprite
        self.original_index = collection.index_of(sprite)
        selected = collection.selected_item
        self.previous_selection_id = None if selected is None else selected.id

    @property
    def name(self) -> str:
        return f"Remove Sprite '{self.sprite.name}'"

    def execute(self) -> None:
        self._collection.remove_item_internal(self.sprite)
        if self._events is not None:
            self._events.sprite_removed.emit(self.sprite)

    def undo(self) -> None:
        self._collection.add_existing_item_internal(self.sprite, self.original_index)
        if self.previous_selection_id == self.sprite.id:
            self._collection.selected_item = self.sprite
        else:
            _restore_selection(self._collection, self.previous_selection_id)
        if self._events is not None:
            self._events.sprite_added.emit(self.sprite)


class ModifySpritePropertyCommand(Command):
    """Writes one sprite field, addressed by a :class:`SpriteProperty`.

    ``prop`` may also be given as a dotted path such as ``"source.x"``; unknown
    paths raise ``ValueError`` here, before the command can be executed.
    """

    def __init__(
        self,
        sprite: SpriteItem,
        prop: SpriteProperty | str,
        old_value: Any,
        new_value: Any,
        events: EditorEvents | None = None,
    ) -> None:
        super().__init__(events)
        self.sprite = sprite
        self.prop = SpriteProperty.from_path(prop)
        self.old_value = old_value
        self.new_value = new_value

    @property
    def name(self) -> str:
        return f"Modify Sprite '{self.sprite.name}' {self.prop.path}"

    def execute(self) -> None:
        self._apply(self.new_value)

    def undo(self) -> None:
        self._apply(self.old_value)

    def _apply(self, value: Any) -> None:
        set_property(self.sprite, self.prop, value)
        if self._events is not None:
            self._events.sprite_modified.emit(self.sprite, self.prop.path)


class CompositeCommand(Command):
    """Several commands recorded as one history entry; undo runs them in reverse."""

    def __init__(self, name: str, commands: Iterable[Command]) -> None:
        super().__init__()
        self._name = name
        self.commands: List[Command] = list(commands)

    @property
    def name(self) -> str:
        return self._name

    def execute(self) -> None:
        for command in self.commands:
            command.execute()

    def undo(self) -> None:
        for command in reversed(self.commands):
            command.undo()

    def redo(self) -> None:
        for command in self.commands:
            command.redo()


def _collider_index(sprite: SpriteItem, collider: Collider) -> int:
    for index, candidate in enumerate(sprite.colliders):
        if candidate is collider:
            return index
    return -1


class AddColliderCommand(Command):
    def __init__(self, sprite: SpriteItem, collider: Collider, events: EditorEvents | None = None) -> None:
        super().__init__(events)
        self.sprite = sprite
        self.collider = collider

    @property
    def name(self) -> str:
        return f"Add Collider to '{self.sprite.name}'"

    def execute(self) -> None:
        self.sprite.colliders.append(self.collider)
        self.sprite.notify_changed("colliders")
        if self._events is not None:
            self._events.collider_added.emit(self.sprite, self.collider)

    def undo(self) -> None:
        index = _collider_index(self.sprite, self.collider)
        if index < 0:
            logger.debug("Collider undo skipped, collider not on sprite id=%s", self.sprite.id)
            return
        del self.sprite.colliders[index]
        self.sprite.notify_changed("colliders")
        if self._events is not None:
            self._events.collider_removed.emit(self.sprite, self.collider)


class RemoveColliderCommand(Command):
    def __init__(self, sprite: SpriteItem, collider: Collider, events: EditorEvents | None = None) -> None:
        super().__init__(events)
        self.sprite = sprite
        self.collider = collider
        self.original_index = _collider_index(sprite, collider)

    @property
    def name(self) -> str:
        return f"Remove Collider from '{self.sprite.name}'"

    def execute(self) -> None:
        index = _collider_index(self.sprite, self.collider)
        if index < 0:
            logger.debug("Collider remove skipped, collider not on sprite id=%s", self.sprite.id)
            return
        del self.sprite.colliders[index]
        self.sprite.notify_changed("colliders")
        if self._events is not None:
            self._events.collider_removed.emit(self.sprite, self.collider)

    def undo(self) -> None:
        if 0 <= self.original_index <= len(self.sprite.colliders):
            self.sprite.colliders.insert(self.original_index, self.collider)
        else:
            self.sprite.colliders.append(self.collider)
        self.sprite.notify_changed("colliders")
        if self._events is not None:
            self._events.collider_added.emit(self.sprite, self.collider)
