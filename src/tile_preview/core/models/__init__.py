"""
Core Models Package

Immutable geometry and source models plus the mutable preview canvas.

All geometry models are frozen dataclasses and are shared between
pipeline stages as-is. The PreviewCanvas is the one mutable object and
is owned by a single session.
"""

from .geometry import Bounds, Dimensions, PlacementRect
from .source import ResolvedSource, SourceMode
from .canvas import CanvasLayer, PreviewCanvas

__all__ = [
    "Bounds",
    "Dimensions",
    "PlacementRect",
    "ResolvedSource",
    "SourceMode",
    "CanvasLayer",
    "PreviewCanvas",
]
