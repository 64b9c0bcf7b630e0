"""
Module: core.models.source

Purpose:
    Describes where the tile came from. The resolver returns exactly one
    ResolvedSource per session, tagged with the SourceMode that produced it.

Key Classes:
    - SourceMode: IMAGE / LAYER / SELECTION
    - ResolvedSource: Tile pixels plus the mode-specific extraction data

Used By:
    - preview.source.resolver: Creates ResolvedSource
    - preview.session: Feeds the tile into planning and compositing
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from PIL import Image

from .geometry import Bounds, Dimensions


class SourceMode(Enum):
    """
    Which part of the document is used as the tile.

    Priority when resolving: SELECTION > LAYER > IMAGE.

    Attributes:
        IMAGE: Whole flattened document
        LAYER: Active layer, or a flattened copy of the active group
        SELECTION: Active layer cropped to the selection bounds
    """

    IMAGE = "IMAGE"
    LAYER = "LAYER"
    SELECTION = "SELECTION"


@dataclass(frozen=True)
class ResolvedSource:
    """
    Tile pixels extracted from a document (immutable).

    Attributes:
        mode: Mode that produced this tile
        image: RGBA tile pixels, exactly ``dimensions`` in size
        region: Document-space bounds the pixels were taken from
        layer_name: Source layer/group name (None in IMAGE mode)
        from_group: True when the pixels are a flattened layer group
    """

    mode: SourceMode
    image: Image.Image
    region: Bounds
    layer_name: Optional[str] = None
    from_group: bool = False

    @property
    def dimensions(self) -> Dimensions:
        """Tile size in pixels."""
        return Dimensions(self.image.width, self.image.height)
