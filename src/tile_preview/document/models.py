"""
Module: document.models

Purpose:
    In-memory model of a host document: its canvas size, layer tree,
    active layer and selection. The resolver only reads from these
    objects; it never modifies them.

Key Classes:
    - Layer: Pixel layer positioned on the document
    - LayerGroup: Ordered group of layers and nested groups
    - Selection: Active selection bounds with an optional coverage mask
    - Document: Complete document context

Dependencies:
    - PIL.Image: Layer pixel buffers

Used By:
    - document.rendering: Rasterises layers and groups
    - preview.source.resolver: Chooses and extracts the tile
    - host.memory / cli: Build documents from images
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union

from PIL import Image

from tile_preview.core.models.geometry import Bounds, Dimensions


@dataclass
class Layer:
    """
    A single pixel layer.

    Attributes:
        name: Layer name
        image: Pixel content (converted to RGBA on construction)
        offset: (x, y) of the image's top-left corner in document space
        visible: Whether the layer takes part in flattening
    """

    name: str
    image: Image.Image
    offset: Tuple[int, int] = (0, 0)
    visible: bool = True

    is_group = False

    def __post_init__(self) -> None:
        if self.image.mode != "RGBA":
            self.image = self.image.convert("RGBA")


@dataclass
class LayerGroup:
    """
    A group of layers (a "layer set" in host terms).

    Children are ordered bottom first, like the document layer list.
    """

    name: str
    children: List[LayerNode] = field(default_factory=list)
    visible: bool = True

    is_group = True

    def iter_layers(self) -> Iterator[LayerNode]:
        """Yield every descendant node, depth first."""
        for child in self.children:
            yield child
            if child.is_group:
                yield from child.iter_layers()


LayerNode = Union[Layer, LayerGroup]


@dataclass(frozen=True)
class Selection:
    """
    Active selection on a document.

    Attributes:
        bounds: Bounding box of the selection in document space
        mask: Optional coverage mask the size of the document, mode "L"
            or "1" (masks with an alpha band are read from alpha).
            255 marks fully selected pixels. None means the selection
            is exactly its bounding rectangle.
    """

    bounds: Bounds
    mask: Optional[Image.Image] = None

    @classmethod
    def rectangle(cls, left: int, top: int, right: int, bottom: int) -> Selection:
        return cls(bounds=Bounds(left, top, right, bottom))


@dataclass
class Document:
    """
    Host document context.

    Attributes:
        width: Document width in pixels
        height: Document height in pixels
        layers: Top-level layers and groups, bottom first
        active_layer: Currently targeted node (defaults to the top-most layer)
        selection: Active selection, if any
        resolution: Pixels per inch
        name: Document name

    Example:
        >>> doc = Document.from_image(Image.new("RGBA", (64, 64), "red"))
        >>> doc.layer_count, doc.has_groups
        (1, False)
    """

    width: int
    height: int
    layers: List[LayerNode] = field(default_factory=list)
    active_layer: Optional[LayerNode] = None
    selection: Optional[Selection] = None
    resolution: float = 72.0
    name: str = "Untitled"

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Document size must be positive: {self.width}x{self.height}")
        if self.active_layer is None and self.layers:
            self.active_layer = self.layers[-1]
        if self.active_layer is not None and not self._contains(self.active_layer):
            raise ValueError(f"Active layer {self.active_layer.name!r} is not part of the document")

    @classmethod
    def from_image(
        cls,
        image: Image.Image,
        *,
        name: str = "Untitled",
        resolution: float = 72.0,
    ) -> Document:
        """Create a single-layer document from an image."""
        layer = Layer(name="Background", image=image)
        return cls(
            width=image.width,
            height=image.height,
            layers=[layer],
            resolution=resolution,
            name=name,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def size(self) -> Dimensions:
        return Dimensions(self.width, self.height)

    @property
    def bounds(self) -> Bounds:
        return Bounds.from_size(self.width, self.height)

    @property
    def layer_count(self) -> int:
        """Number of top-level pixel layers (groups not counted)."""
        return sum(1 for node in self.layers if not node.is_group)

    @property
    def has_groups(self) -> bool:
        """True if the document contains at least one top-level group."""
        return any(node.is_group for node in self.layers)

    @property
    def has_selection(self) -> bool:
        return self.selection is not None

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    def iter_layers(self) -> Iterator[LayerNode]:
        """Yield every node in the layer tree, depth first."""
        for node in self.layers:
            yield node
            if node.is_group:
                yield from node.iter_layers()

    def find_layer(self, name: str) -> Optional[LayerNode]:
        """Find the first node with the given name."""
        for node in self.iter_layers():
            if node.name == name:
                return node
        return None

    def _contains(self, target: LayerNode) -> bool:
        return any(node is target for node in self.iter_layers())
