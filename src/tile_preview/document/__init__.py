"""
Module: document

Purpose:
    In-memory host document model and side-effect free rendering.

Key Classes:
    - Document, Layer, LayerGroup, Selection

Key Functions:
    - flatten_group(), flatten_document(), render_node()
    - content_bounds(), is_rectangular_selection()
"""

from .models import Document, Layer, LayerGroup, LayerNode, Selection
from .rendering import (
    content_bounds,
    flatten_document,
    flatten_group,
    is_rectangular_selection,
    render_node,
)

__all__ = [
    "Document",
    "Layer",
    "LayerGroup",
    "LayerNode",
    "Selection",
    "content_bounds",
    "flatten_document",
    "flatten_group",
    "is_rectangular_selection",
    "render_node",
]
