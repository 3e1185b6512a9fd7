"""Domain events published while a document is edited."""
from __future__ import annotations

from PySide6.QtCore import QObject, Signal


class EditorEvents(QObject):
    """Signals the canvas listens to for marker creation, removal and refresh."""

    sprite_added = Signal(object)  # SpriteItem
    sprite_removed = Signal(object)  # SpriteItem
    sprite_modified = Signal(object, str)  # SpriteItem, property path
    collider_added = Signal(object, object)  # SpriteItem, Collider
    collider_removed = Signal(object, object)  # SpriteItem, Collider
