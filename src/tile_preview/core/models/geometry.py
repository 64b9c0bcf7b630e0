"""
Module: geometry

Purpose:
    Pixel geometry shared by every stage of the preview pipeline:
    tile/canvas sizes, document-space regions and grid placements.

Key Classes:
    - Dimensions: Width/height pair (may be empty)
    - Bounds: Document-space region [left, right) x [top, bottom)
    - PlacementRect: One grid cell in canvas coordinates

Dependencies:
    - dataclasses (std)

Used By:
    - document.models: Layer and selection bounds
    - preview.layout.planner: Placement generation
    - preview.output: Compositing and annotation
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class Dimensions:
    """
    Size of a tile or canvas in pixels.

    Zero values are allowed so an empty source can be described, but
    grid planning refuses to work with an empty tile.

    Example:
        >>> Dimensions(64, 32).area
        2048
        >>> Dimensions(0, 32).is_empty
        True
    """

    width: int
    height: int

    def __post_init__(self) -> None:
        """Validate dimensions on construction."""
        if self.width < 0:
            raise ValueError(f"width must be >= 0: {self.width}")
        if self.height < 0:
            raise ValueError(f"height must be >= 0: {self.height}")

    @property
    def is_empty(self) -> bool:
        """True if either side is zero."""
        return self.width == 0 or self.height == 0

    @property
    def area(self) -> int:
        return self.width * self.height

    def as_tuple(self) -> tuple[int, int]:
        """Get as (width, height) tuple for PIL."""
        return (self.width, self.height)

    def __repr__(self) -> str:
        return f"Dimensions({self.width}x{self.height})"


@dataclass(frozen=True, slots=True)
class Bounds:
    """
    Rectangular region in document coordinates.

    The region is [left, right) x [top, bottom), matching PIL boxes.
    An empty region (right == left or bottom == top) is valid.

    Invariants:
        - right >= left
        - bottom >= top

    Example:
        >>> b = Bounds(10, 20, 74, 84)
        >>> b.dimensions
        Dimensions(64x64)
    """

    left: int
    top: int
    right: int
    bottom: int

    def __post_init__(self) -> None:
        """Validate bounds on construction."""
        if self.right < self.left:
            raise ValueError(f"right must be >= left: {self.right} < {self.left}")
        if self.bottom < self.top:
            raise ValueError(f"bottom must be >= top: {self.bottom} < {self.top}")

    # ─────────────────────────────────────────────────────────────────────────
    # Constructors
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def from_box(cls, box: Optional[tuple[int, int, int, int]]) -> Bounds:
        """
        Build bounds from a PIL box, treating None as an empty region.

        ``Image.getbbox()`` returns None for fully transparent images, so
        this is the natural way to turn its result into bounds.
        """
        if box is None:
            return cls.empty()
        left, top, right, bottom = box
        return cls(int(left), int(top), int(right), int(bottom))

    @classmethod
    def from_size(cls, width: int, height: int) -> Bounds:
        return cls(0, 0, width, height)

    @classmethod
    def empty(cls) -> Bounds:
        return cls(0, 0, 0, 0)

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def dimensions(self) -> Dimensions:
        return Dimensions(self.width, self.height)

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    # ─────────────────────────────────────────────────────────────────────────
    # Operations
    # ─────────────────────────────────────────────────────────────────────────

    def intersect(self, other: Bounds) -> Bounds:
        """
        Clip this region to another.

        Returns an empty Bounds when the regions do not overlap.
        """
        left = max(self.left, other.left)
        top = max(self.top, other.top)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        if right <= left or bottom <= top:
            return Bounds.empty()
        return Bounds(left, top, right, bottom)

    def as_box(self) -> tuple[int, int, int, int]:
        """Get as (left, top, right, bottom) tuple for PIL crop."""
        return (self.left, self.top, self.right, self.bottom)

    def __repr__(self) -> str:
        return f"Bounds({self.left}, {self.top}, {self.right}, {self.bottom})"


@dataclass(frozen=True, slots=True)
class PlacementRect:
    """
    One grid cell in output-canvas coordinates.

    Attributes:
        x: Left edge of the cell
        y: Top edge of the cell
        width: Cell width (always the tile width)
        height: Cell height (always the tile height)
        row: Grid row index (0-indexed)
        col: Grid column index (0-indexed)

    Example:
        >>> cell = PlacementRect(x=64, y=0, width=64, height=64, row=0, col=1)
        >>> cell.right
        128
    """

    x: int
    y: int
    width: int
    height: int
    row: int = 0
    col: int = 0

    @property
    def right(self) -> int:
        """Right edge (exclusive)."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Bottom edge (exclusive)."""
        return self.y + self.height

    @property
    def origin(self) -> tuple[int, int]:
        """Top-left corner as a PIL paste offset."""
        return (self.x, self.y)

    @property
    def dimensions(self) -> Dimensions:
        return Dimensions(self.width, self.height)

    def overlaps(self, other: PlacementRect) -> bool:
        """
        Check if two cells share at least one pixel.

        Cells that only touch along an edge do NOT overlap.
        """
        return not (
            self.right <= other.x
            or other.right <= self.x
            or self.bottom <= other.y
            or other.bottom <= self.y
        )

    def as_box(self) -> tuple[int, int, int, int]:
        """Get as (left, top, right, bottom) tuple for PIL."""
        return (self.x, self.y, self.right, self.bottom)
