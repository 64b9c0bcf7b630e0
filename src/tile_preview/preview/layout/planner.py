"""
Module: preview.layout.planner

Purpose:
    Compute the preview canvas size and the placement of every tile.
    Tiles are packed edge to edge and separated by ``gap`` pixels between
    neighbours; no gap is added at the canvas edges.

Key Functions:
    - canvas_size(): Output canvas dimensions for a tile and config
    - plan_grid(): Main entry point, canvas size plus placements

Dependencies:
    - preview.config: TileConfig

Used By:
    - preview.session: PLAN_GRID step
"""

from __future__ import annotations

import logging
from typing import List

from tile_preview.core.errors import EmptySourceError
from tile_preview.core.models.geometry import Dimensions, PlacementRect

from ..config import TileConfig
from .models import GridPlan

logger = logging.getLogger(__name__)


def canvas_size(tile: Dimensions, config: TileConfig) -> Dimensions:
    """
    Size of the canvas holding ``rows x cols`` tiles.

    width  = cols * tile.width  + gap * (cols - 1)
    height = rows * tile.height + gap * (rows - 1)

    Example:
        >>> canvas_size(Dimensions(50, 50), TileConfig(rows=2, cols=2, gap=10))
        Dimensions(110x110)
    """
    width = config.cols * tile.width + config.gap * (config.cols - 1)
    height = config.rows * tile.height + config.gap * (config.rows - 1)
    return Dimensions(width, height)


def plan_grid(tile: Dimensions, config: TileConfig) -> GridPlan:
    """
    Plan the tile grid.

    Cell (row, col) has its top-left corner at
    ``(col * (tile.width + gap), row * (tile.height + gap))``.
    Placements are generated row-major: every column of row 0,
    then row 1, and so on.

    Args:
        tile: Tile size (must be non-empty)
        config: Rows, columns and gap

    Returns:
        GridPlan with ``rows * cols`` placements

    Raises:
        InvalidConfigError: If rows < 1, cols < 1 or gap < 0
        EmptySourceError: If the tile has zero width or height

    Example:
        >>> plan = plan_grid(Dimensions(64, 64), TileConfig(rows=2, cols=3, gap=0))
        >>> [p.origin for p in plan.placements]
        [(0, 0), (64, 0), (128, 0), (0, 64), (64, 64), (128, 64)]
    """
    config.validate()
    if tile.is_empty:
        raise EmptySourceError(f"Cannot tile an empty source ({tile.width}x{tile.height})")

    step_x = tile.width + config.gap
    step_y = tile.height + config.gap

    placements: List[PlacementRect] = []
    for row in range(config.rows):
        for col in range(config.cols):
            placements.append(
                PlacementRect(
                    x=col * step_x,
                    y=row * step_y,
                    width=tile.width,
                    height=tile.height,
                    row=row,
                    col=col,
                )
            )

    canvas = canvas_size(tile, config)
    logger.debug(
        f"Planned {config.rows}x{config.cols} grid of {tile.width}x{tile.height} tiles "
        f"(gap {config.gap}) on {canvas.width}x{canvas.height} canvas"
    )

    return GridPlan(
        canvas=canvas,
        tile=tile,
        rows=config.rows,
        cols=config.cols,
        gap=config.gap,
        placements=tuple(placements),
    )
