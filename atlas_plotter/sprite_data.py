"""Sprite records stored in an atlas document."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Tuple

logger = logging.getLogger(__name__)

ColorTuple = Tuple[int, int, int]
ChangeCallback = Callable[[Any, str], None]

DEFAULT_COLLIDER_TYPE = "rectangle"


class SpriteDataError(ValueError):
    """Raised when a sprite payload does not have the expected shape."""


class ObservableRecord:
    """Publishes every public attribute write to subscribed callbacks.

    Nested records forward their changes to the owner with a dotted path, so a
    write to ``sprite.source.x`` reaches the sprite's subscribers as
    ``"source.x"``.
    """

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        previous = self.__dict__.get(name)
        if isinstance(previous, ObservableRecord) and previous is not value:
            previous._unlink_owner(self, name)
        object.__setattr__(self, name, value)
        if isinstance(value, ObservableRecord) and previous is not value:
            value._link_owner(self, name)
        self.notify_changed(name)

    def subscribe(self, callback: ChangeCallback) -> None:
        listeners: List[ChangeCallback] = self.__dict__.setdefault("_listeners", [])
        if callback not in listeners:
            listeners.append(callback)

    def unsubscribe(self, callback: ChangeCallback) -> None:
        listeners: List[ChangeCallback] = self.__dict__.get("_listeners", [])
        if callback in listeners:
            listeners.remove(callback)

    def notify_changed(self, path: str) -> None:
        for callback in list(self.__dict__.get("_listeners", ())):
            callback(self, path)
        for owner, attr in list(self.__dict__.get("_owners", ())):
            owner.notify_changed(f"{attr}.{path}")

    def _link_owner(self, owner: ObservableRecord, attr: str) -> None:
        owners: List[Tuple[ObservableRecord, str]] = self.__dict__.setdefault("_owners", [])
        owners.append((owner, attr))

    def _unlink_owner(self, owner: ObservableRecord, attr: str) -> None:
        owners: List[Tuple[ObservableRecord, str]] = self.__dict__.get("_owners", [])
        self.__dict__["_owners"] = [
            (linked, linked_attr) for linked, linked_attr in owners if not (linked is owner and linked_attr == attr)
        ]


def _lowered(payload: Any, context: str) -> Dict[str, Any]:
    if not isinstance(payload, Mapping):
        raise SpriteDataError(f"{context} must be an object, got {type(payload).__name__}")
    return {str(key).lower(): value for key, value in payload.items()}


def _read_int(data: Dict[str, Any], key: str, context: str, default: int = 0) -> int:
    raw = data.get(key.lower(), default)
    if raw is None:
        return default
    if isinstance(raw, bool):
        raise SpriteDataError(f"{context}.{key} must be an integer")
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise SpriteDataError(f"{context}.{key} must be an integer") from exc


def _read_bool(data: Dict[str, Any], key: str, context: str, default: bool = False) -> bool:
    raw = data.get(key.lower(), default)
    if raw is None:
        return default
    if not isinstance(raw, bool):
        raise SpriteDataError(f"{context}.{key} must be true or false")
    return raw


def _read_str(data: Dict[str, Any], key: str, default: str = "") -> str:
    raw = data.get(key.lower(), default)
    return default if raw is None else str(raw)


@dataclass
class PointOffset(ObservableRecord):
    x: int = 0
    y: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"X": self.x, "Y": self.y}

    @classmethod
    def from_dict(cls, payload: Any, context: str = "Offset") -> "PointOffset":
        data = _lowered(payload, context)
        return cls(x=_read_int(data, "X", context), y=_read_int(data, "Y", context))


@dataclass
class RectSource(ObservableRecord):
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"X": self.x, "Y": self.y, "Width": self.width, "Height": self.height}

    @classmethod
    def from_dict(cls, payload: Any, context: str = "Source") -> "RectSource":
        data = _lowered(payload, context)
        return cls(
            x=_read_int(data, "X", context),
            y=_read_int(data, "Y", context),
            width=_read_int(data, "Width", context),
            height=_read_int(data, "Height", context),
        )

    def as_box(self) -> Tuple[int, int, int, int]:
        """Return ``(left, top, right, bottom)`` as used by Pillow."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass(eq=False)
class Collider(ObservableRecord):
    type: str = DEFAULT_COLLIDER_TYPE
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"Type": self.type, "X": self.x, "Y": self.y, "Width": self.width, "Height": self.height}

    @classmethod
    def from_dict(cls, payload: Any, context: str = "Collider") -> "Collider":
        data = _lowered(payload, context)
        return cls(
            type=_read_str(data, "Type", DEFAULT_COLLIDER_TYPE),
            x=_read_int(data, "X", context),
            y=_read_int(data, "Y", context),
            width=_read_int(data, "Width", context),
            height=_read_int(data, "Height", context),
        )


@dataclass
class BreakingAnimation(ObservableRecord):
    source: RectSource = field(default_factory=RectSource)
    offset: PointOffset = field(default_factory=PointOffset)
    x_inverted: int = 0
    frame_duration: int = 0  # milliseconds per frame
    nb_frames: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Source": self.source.to_dict(),
            "Offset": self.offset.to_dict(),
            "XInverted": self.x_inverted,
            "FrameDuration": self.frame_duration,
            "NbFrames": self.nb_frames,
        }

    @classmethod
    def from_dict(cls, payload: Any, context: str = "BreakingAnimation") -> "BreakingAnimation":
        data = _lowered(payload, context)
        return cls(
            source=RectSource.from_dict(data.get("source") or {}, f"{context}.Source"),
            offset=PointOffset.from_dict(data.get("offset") or {}, f"{context}.Offset"),
            x_inverted=_read_int(data, "XInverted", context),
            frame_duration=_read_int(data, "FrameDuration", context),
            nb_frames=_read_int(data, "NbFrames", context),
        )


@dataclass(eq=False)
class SpriteItem(ObservableRecord):
    id: int = 0
    name: str = ""
    y_sort: int = 0
    fragile: bool = False
    breakable: bool = False
    offset: PointOffset = field(default_factory=PointOffset)
    source: RectSource = field(default_factory=RectSource)
    shadow_offset: PointOffset = field(default_factory=PointOffset)
    shadow_source: RectSource = field(default_factory=RectSource)
    colliders: List[Collider] = field(default_factory=list)
    breaking_animation: BreakingAnimation = field(default_factory=BreakingAnimation)

    @classmethod
    def create_default(cls, sprite_id: int) -> "SpriteItem":
        """Build the sample sprite a fresh region starts from."""
        ticks = time.time_ns() // 100
        return cls(
            id=sprite_id,
            name=f"sprite_{ticks % 10000}",
            y_sort=10,
            fragile=True,
            breakable=True,
            offset=PointOffset(3, 3),
            source=RectSource(0, 0, 10, 9),
            shadow_offset=PointOffset(4, 8),
            shadow_source=RectSource(1, 18, 8, 6),
            colliders=[],
            breaking_animation=BreakingAnimation(
                source=RectSource(0, 284, 28, 20),
                offset=PointOffset(-3, -6),
                x_inverted=-9,
                frame_duration=75,
                nb_frames=4,
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Id": self.id,
            "Name": self.name,
            "YSort": self.y_sort,
            "Fragile": self.fragile,
            "Breakable": self.breakable,
            "Offset": self.offset.to_dict(),
            "Source": self.source.to_dict(),
            "ShadowOffset": self.shadow_offset.to_dict(),
            "ShadowSource": self.shadow_source.to_dict(),
            "Colliders": [collider.to_dict() for collider in self.colliders],
            "BreakingAnimation": self.breaking_animation.to_dict(),
        }

    @classmethod
    def from_dict(cls, payload: Any, context: str = "Sprite") -> "SpriteItem":
        data = _lowered(payload, context)
        raw_colliders = data.get("colliders") or []
        if not isinstance(raw_colliders, list):
            raise SpriteDataError(f"{context}.Colliders must be a list")
        return cls(
            id=_read_int(data, "Id", context),
            name=_read_str(data, "Name"),
            y_sort=_read_int(data, "YSort", context),
            fragile=_read_bool(data, "Fragile", context),
            breakable=_read_bool(data, "Breakable", context),
            offset=PointOffset.from_dict(data.get("offset") or {}, f"{context}.Offset"),
            source=RectSource.from_dict(data.get("source") or {}, f"{context}.Source"),
            shadow_offset=PointOffset.from_dict(data.get("shadowoffset") or {}, f"{context}.ShadowOffset"),
            shadow_source=RectSource.from_dict(data.get("shadowsource") or {}, f"{context}.ShadowSource"),
            colliders=[
                Collider.from_dict(entry, f"{context}.Colliders[{index}]") for index, entry in enumerate(raw_colliders)
            ],
            breaking_animation=BreakingAnimation.from_dict(
                data.get("breakinganimation") or {}, f"{context}.BreakingAnimation"
            ),
        )


def _normalize_path(path: str) -> str:
    return path.strip().replace("_", "").lower()


class SpriteProperty(Enum):
    """Editable sprite fields, each addressed by its dotted attribute path."""

    NAME = ("name", str)
    Y_SORT = ("y_sort", int)
    FRAGILE = ("fragile", bool)
    BREAKABLE = ("breakable", bool)
    OFFSET_X = ("offset.x", int)
    OFFSET_Y = ("offset.y", int)
    SOURCE_X = ("source.x", int)
    SOURCE_Y = ("source.y", int)
    SOURCE_WIDTH = ("source.width", int)
    SOURCE_HEIGHT = ("source.height", int)
    SHADOW_OFFSET_X = ("shadow_offset.x", int)
    SHADOW_OFFSET_Y = ("shadow_offset.y", int)
    SHADOW_SOURCE_X = ("shadow_source.x", int)
    SHADOW_SOURCE_Y = ("shadow_source.y", int)
    SHADOW_SOURCE_WIDTH = ("shadow_source.width", int)
    SHADOW_SOURCE_HEIGHT = ("shadow_source.height", int)
    BREAKING_SOURCE_X = ("breaking_animation.source.x", int)
    BREAKING_SOURCE_Y = ("breaking_animation.source.y", int)
    BREAKING_SOURCE_WIDTH = ("breaking_animation.source.width", int)
    BREAKING_SOURCE_HEIGHT = ("breaking_animation.source.height", int)
    BREAKING_OFFSET_X = ("breaking_animation.offset.x", int)
    BREAKING_OFFSET_Y = ("breaking_animation.offset.y", int)
    BREAKING_X_INVERTED = ("breaking_animation.x_inverted", int)
    BREAKING_FRAME_DURATION = ("breaking_animation.frame_duration", int)
    BREAKING_NB_FRAMES = ("breaking_animation.nb_frames", int)

    def __init__(self, path: str, value_type: type) -> None:
        self.path = path
        self.value_type = value_type

    @classmethod
    def from_path(cls, path: "str | SpriteProperty") -> "SpriteProperty":
        """Resolve ``"source.x"``, ``"Source.X"`` or ``"y_sort"`` style paths."""
        if isinstance(path, SpriteProperty):
            return path
        wanted = _normalize_path(str(path))
        for member in cls:
            if _normalize_path(member.path) == wanted:
                return member
        raise ValueError(f"Unknown sprite property: {path!r}")

    def coerce(self, value: Any) -> Any:
        """Convert a committed text edit to the field's type."""
        if self.value_type is bool:
            if isinstance(value, str):
                return value.strip().lower() in {"1", "true", "yes", "on"}
            return bool(value)
        return self.value_type(value)


def get_property(sprite: SpriteItem, prop: SpriteProperty) -> Any:
    target: Any = sprite
    for segment in prop.path.split("."):
        target = getattr(target, segment)
    return target


def set_property(sprite: SpriteItem, prop: SpriteProperty, value: Any) -> None:
    *parents, leaf = prop.path.split(".")
    target: Any = sprite
    for segment in parents:
        target = getattr(target, segment)
    setattr(target, leaf, value)
