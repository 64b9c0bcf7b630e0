"""
Module: preview.output.annotator

Purpose:
    Mark the reference tile on a finished preview. A 1px magenta outline
    is stroked along the inside edge of the top-left tile on its own layer
    above the tiles, so the pattern pixels are never modified.

Key Functions:
    - annotate(): Add the highlight layer to a canvas
    - highlight_box(): Inclusive outline box for a tile

Dependencies:
    - PIL: ImageDraw for the outline

Used By:
    - preview.session: ANNOTATE step
"""

from __future__ import annotations

import logging
from typing import Tuple

from PIL import ImageDraw

from tile_preview.core.errors import AnnotationError
from tile_preview.core.models.canvas import PreviewCanvas
from tile_preview.core.models.geometry import Dimensions

logger = logging.getLogger(__name__)

HIGHLIGHT_LAYER_NAME = "Tile Highlight"
HIGHLIGHT_COLOR = (0xFF, 0x00, 0xFF, 0xFF)  # FF00FF, fully opaque
HIGHLIGHT_WIDTH = 1


def highlight_box(tile: Dimensions) -> Tuple[int, int, int, int]:
    """
    Outline box for the reference tile, in PIL's inclusive coordinates.

    Stroking this box keeps the line inside [(0, 0) .. tile].

    Example:
        >>> highlight_box(Dimensions(64, 32))
        (0, 0, 63, 31)
    """
    return (0, 0, tile.width - 1, tile.height - 1)


def annotate(canvas: PreviewCanvas, tile: Dimensions) -> PreviewCanvas:
    """
    Highlight the reference (top-left) tile.

    Adds a new top-most layer and strokes the tile boundary on it.
    The canvas is modified in place and returned for chaining.

    Args:
        canvas: Composited preview canvas
        tile: Tile size

    Returns:
        The same canvas with a "Tile Highlight" layer on top

    Raises:
        AnnotationError: If the outline cannot be drawn. Any partially
            added layer is removed and the canvas is attached to the error.
    """
    if tile.is_empty:
        raise AnnotationError(f"Cannot highlight an empty tile ({tile.width}x{tile.height})", canvas=canvas)
    if tile.width > canvas.width or tile.height > canvas.height:
        raise AnnotationError(
            f"Tile {tile.width}x{tile.height} does not fit the "
            f"{canvas.width}x{canvas.height} canvas",
            canvas=canvas,
        )

    layer = None
    try:
        layer = canvas.add_layer(HIGHLIGHT_LAYER_NAME)
        draw = ImageDraw.Draw(layer.image)
        draw.rectangle(highlight_box(tile), outline=HIGHLIGHT_COLOR, width=HIGHLIGHT_WIDTH)
    except Exception as e:
        if layer is not None:
            canvas.remove_layer(layer)
        raise AnnotationError(f"Unable to highlight the reference tile: {e}", canvas=canvas) from e

    logger.debug(f"Highlighted reference tile at {highlight_box(tile)}")
    return canvas
