"""Atlas bitmap helpers: pixel lookup and per-sprite crops."""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Tuple

from PIL import Image, UnidentifiedImageError

from .sprite_data import RectSource, SpriteItem

logger = logging.getLogger(__name__)

RGBATuple = Tuple[int, int, int, int]


class AtlasError(RuntimeError):
    """Raised when the atlas bitmap cannot be read or cropped."""


def _safe_name(name: str) -> str:
    filtered = re.sub(r"[^A-Za-z0-9_.-]+", "_", name).strip("._")
    return filtered or "sprite"


def snap_to_pixel(x: float, y: float) -> Tuple[int, int]:
    """Floor canvas coordinates to the pixel that contains them."""
    return (int(math.floor(x)), int(math.floor(y)))


@dataclass
class AtlasImage:
    path: Path | None
    image: Image.Image

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def pixel_at(self, x: float, y: float) -> RGBATuple | None:
        px, py = snap_to_pixel(x, y)
        if not self.contains(px, py):
            return None
        return tuple(self.image.getpixel((px, py)))  # type: ignore[return-value]

    def crop(self, rect: RectSource) -> Image.Image:
        left, top, right, bottom = rect.as_box()
        left = max(0, left)
        top = max(0, top)
        right = min(self.width, right)
        bottom = min(self.height, bottom)
        if right <= left or bottom <= top:
            raise AtlasError(
                f"Rectangle ({rect.x}, {rect.y}, {rect.width}, {rect.height}) is outside the {self.width}x{self.height} atlas"
            )
        return self.image.crop((left, top, right, bottom))


def load_atlas(path: Path) -> AtlasImage:
    try:
        with Image.open(path) as handle:
            image = handle.convert("RGBA")
    except (OSError, UnidentifiedImageError) as exc:
        raise AtlasError(f"Cannot read atlas image {path}: {exc}") from exc
    logger.debug("Loaded atlas path=%s size=%s", path, image.size)
    return AtlasImage(path=path, image=image)


def export_sprite_crops(atlas: AtlasImage, sprites: Iterable[SpriteItem], out_dir: Path) -> List[Path]:
    """Write one PNG per sprite source rectangle and return the written paths."""

    out_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    used_names: set[str] = set()
    for sprite in sprites:
        try:
            cropped = atlas.crop(sprite.source)
        except AtlasError as exc:
            logger.warning("Skipping sprite id=%s name=%s: %s", sprite.id, sprite.name, exc)
            continue
        stem = _safe_name(sprite.name)
        if stem in used_names:
            stem = f"{stem}_{sprite.id}"
        used_names.add(stem)
        target = out_dir / f"{stem}.png"
        cropped.save(target)
        written.append(target)
        logger.debug("Exported sprite id=%s -> %s size=%s", sprite.id, target.name, cropped.size)
    return written
