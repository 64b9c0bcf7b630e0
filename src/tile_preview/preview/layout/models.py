"""
Module: preview.layout.models

Purpose:
    Result of grid planning: the canvas size and where every tile goes.

Key Classes:
    - GridPlan: Canvas dimensions plus row-major placements
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from tile_preview.core.models.geometry import Dimensions, PlacementRect


@dataclass(frozen=True)
class GridPlan:
    """
    Complete layout plan for one preview (immutable).

    Attributes:
        canvas: Output canvas size
        tile: Size of every cell
        rows: Number of rows
        cols: Number of columns
        gap: Pixels between neighbouring cells
        placements: Cells in row-major order

    Example:
        >>> plan = plan_grid(Dimensions(64, 64), TileConfig(rows=2, cols=3))
        >>> plan.canvas, plan.placement_count
        (Dimensions(192x128), 6)
    """

    canvas: Dimensions
    tile: Dimensions
    rows: int
    cols: int
    gap: int
    placements: tuple[PlacementRect, ...]

    @property
    def placement_count(self) -> int:
        return len(self.placements)

    @property
    def reference(self) -> PlacementRect:
        """The top-left cell, which receives the boundary highlight."""
        return self.placements[0]

    def cell(self, row: int, col: int) -> PlacementRect:
        """Look up a cell by grid position."""
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"Cell ({row}, {col}) outside {self.rows}x{self.cols} grid")
        return self.placements[row * self.cols + col]

    def __iter__(self) -> Iterator[PlacementRect]:
        return iter(self.placements)
