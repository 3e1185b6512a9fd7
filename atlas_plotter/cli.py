"""Command-line interface for atlas document batch operations."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import List

from .atlas_image import AtlasError, export_sprite_crops, load_atlas
from .debug_log import setup_debug_logging
from .sprite_collection import SpriteItemCollection
from .sprite_data import SpriteDataError
from .sprite_json import load_collection, save_collection


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="atlas-plotter", description="Sprite atlas document utilities")
    subparsers = parser.add_subparsers(dest="command", required=True)

    summary = subparsers.add_parser("summary", help="List the sprites of a document")
    summary.add_argument("document", type=Path, help="Atlas JSON document")

    crop = subparsers.add_parser("crop", help="Export every sprite rectangle as a PNG")
    crop.add_argument("atlas", type=Path, help="Atlas bitmap")
    crop.add_argument("document", type=Path, help="Atlas JSON document")
    crop.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Destination folder (defaults to <document dir>/crops)",
    )

    new = subparsers.add_parser("new", help="Write a document of default sprites")
    new.add_argument("document", type=Path, help="Destination JSON document")
    new.add_argument("--count", type=int, default=1, help="Number of default sprites")
    return parser


def _summary_lines(collection: SpriteItemCollection) -> List[str]:
    lines: List[str] = []
    for sprite in collection.items:
        src = sprite.source
        lines.append(
            f"{sprite.id:>6}  {sprite.name:<24} source=({src.x}, {src.y}, {src.width}, {src.height}) "
            f"colliders={len(sprite.colliders)}"
        )
    selected = collection.selected_item
    lines.append(f"{len(collection)} sprite(s), selected: {selected.name if selected is not None else 'none'}")
    return lines


def _run_summary(args: argparse.Namespace) -> int:
    try:
        collection = load_collection(args.document)
    except (SpriteDataError, OSError) as exc:
        print(f"[FAIL] {args.document}: {exc}")
        return 1
    for line in _summary_lines(collection):
        print(line)
    return 0


def _run_crop(args: argparse.Namespace) -> int:
    out_dir = args.out or (args.document.parent / "crops")
    try:
        collection = load_collection(args.document)
        atlas = load_atlas(args.atlas)
        written = export_sprite_crops(atlas, collection.items, out_dir)
    except (SpriteDataError, AtlasError, OSError) as exc:
        print(f"[FAIL] {exc}")
        return 1
    for path in written:
        print(f"[OK] {path.name}")
    skipped = len(collection) - len(written)
    print(f"Exported {len(written)} sprite(s) to {out_dir}, {skipped} skipped.")
    return 0 if skipped == 0 else 1


def _run_new(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    if args.count < 0:
        parser.error("--count must not be negative")
    collection = SpriteItemCollection()
    for _ in range(args.count):
        collection.add_new_item_internal()
    try:
        save_collection(collection, args.document)
    except OSError as exc:
        print(f"[FAIL] {args.document}: {exc}")
        return 1
    print(f"Wrote {len(collection)} sprite(s) to {args.document}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_debug_logging()

    if args.command == "summary":
        return _run_summary(args)
    if args.command == "crop":
        return _run_crop(args)
    return _run_new(args, parser)


if __name__ == "__main__":
    raise SystemExit(main())
