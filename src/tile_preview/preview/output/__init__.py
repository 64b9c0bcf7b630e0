"""
Module: preview.output

Purpose:
    Produce the preview canvas: tile compositing and the reference tile
    highlight.

Key Functions:
    - composite_tiles(), composite_plan(): Build the tiled canvas
    - annotate(): Outline the reference tile

Dependencies:
    - PIL: Image pasting and drawing
"""

from .compositor import TILE_LAYER_NAME, composite_plan, composite_tiles
from .annotator import HIGHLIGHT_COLOR, HIGHLIGHT_LAYER_NAME, annotate, highlight_box

__all__ = [
    "TILE_LAYER_NAME",
    "composite_plan",
    "composite_tiles",
    "HIGHLIGHT_COLOR",
    "HIGHLIGHT_LAYER_NAME",
    "annotate",
    "highlight_box",
]
