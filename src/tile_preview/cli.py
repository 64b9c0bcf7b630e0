"""
Command line host for Tile Preview.

Loads image files into an in-memory document, runs a preview session and
saves the flattened result.

Example:
    tile-preview texture.png --rows 3 --cols 3 --gap 4 -o preview.png
    tile-preview base.png --layer detail.png --layer shadow.png --group --yes -o out.png
    tile-preview sheet.png --selection 0,0,64,64 -o tile_check.png
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from PIL import Image, UnidentifiedImageError

from tile_preview import __version__
from tile_preview.core.errors import InvalidConfigError
from tile_preview.core.models.geometry import Bounds
from tile_preview.document.models import Document, Layer, LayerGroup, LayerNode, Selection
from tile_preview.host.memory import InMemoryHost, LoggingNotifier
from tile_preview.preview.config import TileConfig, load_tile_config
from tile_preview.preview.session import run_preview

logger = logging.getLogger("tile_preview.cli")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELLED = 3

GROUP_NAME = "Group 1"


def _parse_selection(value: str) -> Bounds:
    try:
        left, top, right, bottom = (int(part) for part in value.split(","))
        return Bounds(left, top, right, bottom)
    except ValueError as e:
        raise argparse.ArgumentTypeError(
            f"selection must be LEFT,TOP,RIGHT,BOTTOM with right >= left and bottom >= top: {value!r}"
        ) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tile-preview",
        description="Preview an image, layer or selection repeated as tiles",
    )
    parser.add_argument("image", type=Path, help="Base image (bottom layer)")
    parser.add_argument("-o", "--output", type=Path, required=True, help="Where to save the preview")
    parser.add_argument(
        "--layer",
        dest="layers",
        type=Path,
        action="append",
        default=[],
        help="Extra layer stacked above the base image (repeatable)",
    )
    parser.add_argument("--group", action="store_true", help="Put the extra layers in a layer group")
    parser.add_argument(
        "--active-layer",
        type=int,
        default=None,
        help="Index of the active top-level layer, 0 = bottom (default: top-most)",
    )
    parser.add_argument(
        "--selection",
        type=_parse_selection,
        default=None,
        metavar="L,T,R,B",
        help="Rectangular selection in document pixels",
    )
    parser.add_argument("--config", type=Path, default=None, help="JSON file with rows/cols/gap")
    parser.add_argument("--rows", type=int, default=None, help="Tile rows (default 5)")
    parser.add_argument("--cols", type=int, default=None, help="Tile columns (default 5)")
    parser.add_argument("--gap", type=int, default=None, help="Pixels between tiles (default 0)")
    parser.add_argument("--yes", action="store_true", help="Answer yes to confirmation prompts")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _open_image(path: Path) -> Image.Image:
    with Image.open(path) as img:
        img.load()
        return img.convert("RGBA")


def build_document(args: argparse.Namespace) -> Document:
    """
    Assemble a document from the parsed arguments.

    Raises:
        OSError, UnidentifiedImageError: If an image cannot be read
        ValueError: If the layer index is out of range
    """
    base = _open_image(args.image)
    nodes: List[LayerNode] = [Layer(name="Background", image=base)]
    extra = [Layer(name=path.stem, image=_open_image(path)) for path in args.layers]

    if args.group and extra:
        nodes.append(LayerGroup(name=GROUP_NAME, children=extra))
    else:
        nodes.extend(extra)

    active = None
    if args.active_layer is not None:
        if not 0 <= args.active_layer < len(nodes):
            raise ValueError(f"--active-layer {args.active_layer} out of range (0-{len(nodes) - 1})")
        active = nodes[args.active_layer]

    selection = Selection(bounds=args.selection) if args.selection is not None else None

    return Document(
        width=base.width,
        height=base.height,
        layers=nodes,
        active_layer=active,
        selection=selection,
        resolution=_resolution_of(args.image),
        name=args.image.name,
    )


def _resolution_of(path: Path) -> float:
    with Image.open(path) as img:
        dpi = img.info.get("dpi")
    if dpi:
        return float(dpi[0])
    return 72.0


def _load_config(args: argparse.Namespace) -> TileConfig:
    config = load_tile_config(args.config) if args.config else TileConfig()
    return config.with_overrides(rows=args.rows, cols=args.cols, gap=args.gap)


def _save(image: Image.Image, path: Path, resolution: float) -> None:
    if path.suffix.lower() in (".jpg", ".jpeg"):
        image = image.convert("RGB")
    path.parent.mkdir(parents=True, exist_ok=True)
    image.save(path, dpi=(resolution, resolution))


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    try:
        config = _load_config(args)
    except InvalidConfigError as e:
        logger.error(f"Invalid tiling settings: {e}")
        return EXIT_ERROR

    try:
        document = build_document(args)
    except (OSError, UnidentifiedImageError, ValueError) as e:
        logger.error(f"Could not build document: {e}")
        return EXIT_ERROR

    host = InMemoryHost([document])
    result = run_preview(host, config, LoggingNotifier(assume_yes=args.yes))

    if result.cancelled:
        print("Cancelled")
        return EXIT_CANCELLED
    if not result.succeeded:
        return EXIT_ERROR

    _save(result.canvas.flatten(), args.output, result.canvas.resolution)
    print(
        f"Saved {result.canvas.width}x{result.canvas.height} preview "
        f"({result.plan.rows}x{result.plan.cols} {result.source.mode.value.lower()} tiles) to {args.output}"
    )
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
