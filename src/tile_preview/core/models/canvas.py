"""
Module: core.models.canvas

Purpose:
    The preview output buffer. A PreviewCanvas is a stack of named RGBA
    layers of identical size; the tiled pattern lives on the bottom layer
    and markings such as the tile highlight are added above it.

Key Classes:
    - CanvasLayer: Named RGBA layer
    - PreviewCanvas: Ordered layer stack with flattening

Dependencies:
    - PIL.Image: Layer buffers and alpha compositing

Used By:
    - preview.output.compositor: Creates the canvas
    - preview.output.annotator: Adds the highlight layer
    - host: Receives the finished canvas
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from PIL import Image

from .geometry import Dimensions

logger = logging.getLogger(__name__)

DEFAULT_CANVAS_TITLE = "Tile Preview"
DEFAULT_RESOLUTION = 72.0


@dataclass
class CanvasLayer:
    """
    A named RGBA layer on the preview canvas.

    Attributes:
        name: Layer name shown by the host
        image: RGBA pixel buffer (same size as the canvas)
    """

    name: str
    image: Image.Image


@dataclass
class PreviewCanvas:
    """
    Output image buffer owned by a single preview session.

    Mutated in place by the compositor and the annotator, then handed
    to the host. Layers are ordered bottom first.

    Attributes:
        width: Canvas width in pixels
        height: Canvas height in pixels
        title: Document title for the host
        resolution: Pixels per inch, copied from the source document
        layers: Layer stack, bottom first

    Example:
        >>> canvas = PreviewCanvas.blank(Dimensions(192, 128))
        >>> canvas.add_layer("Tiles").image.size
        (192, 128)
    """

    width: int
    height: int
    title: str = DEFAULT_CANVAS_TITLE
    resolution: float = DEFAULT_RESOLUTION
    layers: List[CanvasLayer] = field(default_factory=list)

    @classmethod
    def blank(
        cls,
        size: Dimensions,
        *,
        title: str = DEFAULT_CANVAS_TITLE,
        resolution: float = DEFAULT_RESOLUTION,
    ) -> PreviewCanvas:
        """Create a canvas with no layers."""
        return cls(width=size.width, height=size.height, title=title, resolution=resolution)

    @property
    def size(self) -> Dimensions:
        return Dimensions(self.width, self.height)

    @property
    def base_layer(self) -> CanvasLayer:
        """Bottom layer holding the tiled pattern."""
        if not self.layers:
            raise LookupError("Canvas has no layers")
        return self.layers[0]

    def add_layer(self, name: str) -> CanvasLayer:
        """
        Add a fully transparent layer on top of the stack.

        Args:
            name: Layer name

        Returns:
            The new layer
        """
        layer = CanvasLayer(name=name, image=Image.new("RGBA", (self.width, self.height), (0, 0, 0, 0)))
        self.layers.append(layer)
        logger.debug(f"Added canvas layer '{name}' ({self.width}x{self.height})")
        return layer

    def remove_layer(self, layer: CanvasLayer) -> None:
        """Remove a layer from the stack and release its buffer."""
        self.layers.remove(layer)
        layer.image.close()

    def get_layer(self, name: str) -> Optional[CanvasLayer]:
        """Find the top-most layer with the given name."""
        for layer in reversed(self.layers):
            if layer.name == name:
                return layer
        return None

    def flatten(self) -> Image.Image:
        """
        Composite every layer into a single RGBA image.

        The canvas itself is not modified.
        """
        result = Image.new("RGBA", (self.width, self.height), (0, 0, 0, 0))
        for layer in self.layers:
            result.alpha_composite(layer.image)
        return result

    def discard(self) -> None:
        """Release every layer buffer. The canvas is unusable afterwards."""
        for layer in self.layers:
            layer.image.close()
        self.layers.clear()
