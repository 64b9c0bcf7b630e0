"""
Module: preview.output.compositor

Purpose:
    Creates the tiled preview canvas. The source tile is pasted once per
    grid cell onto a fully transparent layer; cells never overlap, so
    every paste is an exact copy with no blending or resampling.

Key Functions:
    - composite_tiles(): Allocate a canvas and paste every placement
    - composite_plan(): Same, driven by a GridPlan

Dependencies:
    - PIL.Image: Canvas allocation and pasting
    - core.models.canvas: PreviewCanvas

Used By:
    - preview.session: COMPOSITE step
"""

from __future__ import annotations

import logging
from typing import Sequence

from PIL import Image

from tile_preview.core.errors import CompositeFailureError
from tile_preview.core.models.canvas import (
    DEFAULT_CANVAS_TITLE,
    DEFAULT_RESOLUTION,
    PreviewCanvas,
)
from tile_preview.core.models.geometry import Dimensions, PlacementRect

from ..layout.models import GridPlan

logger = logging.getLogger(__name__)

TILE_LAYER_NAME = "Tiles"


def composite_tiles(
    image: Image.Image,
    size: Dimensions,
    placements: Sequence[PlacementRect],
    *,
    title: str = DEFAULT_CANVAS_TITLE,
    resolution: float = DEFAULT_RESOLUTION,
) -> PreviewCanvas:
    """
    Paste the tile into every placement on a new canvas.

    The canvas starts fully transparent. Each paste is checked and
    performed independently; if any paste fails the canvas is discarded
    and nothing is returned.

    Args:
        image: Tile pixels (converted to RGBA if needed)
        size: Canvas dimensions
        placements: Target cells, each exactly the tile size
        title: Canvas title for the host
        resolution: Pixels per inch, copied from the source document

    Returns:
        PreviewCanvas with a single "Tiles" layer

    Raises:
        CompositeFailureError: If the canvas cannot be allocated or any
            tile cannot be placed

    Example:
        >>> canvas = composite_tiles(tile, plan.canvas, plan.placements)
        >>> canvas.base_layer.name
        'Tiles'
    """
    if size.is_empty:
        raise CompositeFailureError(f"Cannot allocate an empty canvas ({size.width}x{size.height})")

    tile = image if image.mode == "RGBA" else image.convert("RGBA")

    canvas = PreviewCanvas.blank(size, title=title, resolution=resolution)
    try:
        layer = canvas.add_layer(TILE_LAYER_NAME)
    except Exception as e:
        raise CompositeFailureError(
            f"Unable to open a new {size.width}x{size.height} image for preview: {e}"
        ) from e

    try:
        for index, placement in enumerate(placements):
            _paste_tile(layer.image, tile, placement, index)
    except BaseException:
        canvas.discard()
        raise

    logger.info(f"Composited {len(placements)} tiles onto {size.width}x{size.height} canvas")
    return canvas


def composite_plan(
    image: Image.Image,
    plan: GridPlan,
    *,
    title: str = DEFAULT_CANVAS_TITLE,
    resolution: float = DEFAULT_RESOLUTION,
) -> PreviewCanvas:
    """Composite the tile using a GridPlan's canvas size and placements."""
    return composite_tiles(
        image,
        plan.canvas,
        plan.placements,
        title=title,
        resolution=resolution,
    )


def _paste_tile(
    target: Image.Image,
    tile: Image.Image,
    placement: PlacementRect,
    index: int,
) -> None:
    """
    Copy one tile into its placement.

    Raises:
        CompositeFailureError: If the placement does not match the tile
            size, falls outside the canvas, or the paste itself fails
    """
    if (placement.width, placement.height) != tile.size:
        raise CompositeFailureError(
            f"Tile {index} placement {placement.width}x{placement.height} "
            f"does not match tile size {tile.width}x{tile.height}"
        )
    if placement.x < 0 or placement.y < 0 or placement.right > target.width or placement.bottom > target.height:
        raise CompositeFailureError(
            f"Tile {index} at {placement.as_box()} falls outside the "
            f"{target.width}x{target.height} canvas"
        )

    try:
        # No mask: an exact copy including the tile's own alpha
        target.paste(tile, placement.origin)
    except Exception as e:
        raise CompositeFailureError(f"Could not paste tile {index} at {placement.origin}: {e}") from e

    logger.debug(f"Pasted tile {index} at ({placement.x}, {placement.y})")
