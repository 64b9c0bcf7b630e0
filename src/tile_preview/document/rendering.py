"""
Module: document.rendering

Purpose:
    Pure rasterisation helpers for the document model. Layers and groups
    are rendered onto fresh document-sized buffers, so flattening a group
    never touches the caller's document.

Key Functions:
    - render_node(): Rasterise a layer or group at document size
    - flatten_group(): Merge a group's visible children into one image
    - flatten_document(): Merge every visible top-level node
    - content_bounds(): Bounding box of non-transparent pixels
    - is_rectangular_selection(): Check a selection fills its bounds

Dependencies:
    - PIL.Image: Alpha compositing
    - numpy: Alpha and mask array analysis

Used By:
    - preview.source.resolver: Tile extraction
"""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np
from PIL import Image

from tile_preview.core.models.geometry import Bounds, Dimensions

from .models import Document, Layer, LayerGroup, LayerNode, Selection

logger = logging.getLogger(__name__)

# Mask value for a fully selected pixel
FULLY_SELECTED = 255


def _transparent(size: Dimensions) -> Image.Image:
    return Image.new("RGBA", size.as_tuple(), (0, 0, 0, 0))


def _composite_at(target: Image.Image, image: Image.Image, offset: Tuple[int, int]) -> None:
    """
    Alpha-composite ``image`` onto ``target`` with its corner at ``offset``.

    Offsets may be negative or push the image past the target edge;
    the overhang is clipped.
    """
    x, y = offset
    src_x = max(0, -x)
    src_y = max(0, -y)
    if src_x >= image.width or src_y >= image.height:
        return
    dest_x = max(0, x)
    dest_y = max(0, y)
    if dest_x >= target.width or dest_y >= target.height:
        return
    src_right = min(image.width, src_x + target.width - dest_x)
    src_bottom = min(image.height, src_y + target.height - dest_y)
    target.alpha_composite(image, dest=(dest_x, dest_y), source=(src_x, src_y, src_right, src_bottom))


def render_layer(layer: Layer, size: Dimensions) -> Image.Image:
    """
    Rasterise a single layer onto a transparent document-sized buffer.

    The layer's own visibility flag is ignored: an explicitly targeted
    layer is rendered even when hidden.
    """
    result = _transparent(size)
    _composite_at(result, layer.image, layer.offset)
    return result


def flatten_group(group: LayerGroup, size: Dimensions) -> Image.Image:
    """
    Merge a layer group into a single document-sized image.

    Equivalent to duplicating the group, merging the duplicate and
    copying its pixels, but without any side effects. Hidden children
    are skipped; nested groups are merged recursively.

    Args:
        group: Group to flatten
        size: Document size

    Returns:
        New RGBA image the size of the document

    Example:
        >>> merged = flatten_group(group, doc.size)
        >>> merged.size == doc.size.as_tuple()
        True
    """
    result = _transparent(size)
    for child in group.children:
        if not child.visible:
            continue
        result.alpha_composite(render_node(child, size))
    logger.debug(f"Flattened group '{group.name}' ({len(group.children)} children)")
    return result


def render_node(node: LayerNode, size: Dimensions) -> Image.Image:
    """Rasterise a layer or group at document size."""
    if node.is_group:
        return flatten_group(node, size)
    return render_layer(node, size)


def flatten_document(document: Document) -> Image.Image:
    """Merge every visible top-level node of the document."""
    result = _transparent(document.size)
    for node in document.layers:
        if node.visible:
            result.alpha_composite(render_node(node, document.size))
    return result


def content_bounds(image: Image.Image) -> Bounds:
    """
    Bounding box of all pixels with non-zero alpha.

    Returns:
        Bounds of the visible content, empty if the image is fully
        transparent.
    """
    alpha = np.asarray(image.getchannel("A"))
    ys, xs = np.where(alpha > 0)
    if len(xs) == 0:
        return Bounds.empty()
    return Bounds(int(xs.min()), int(ys.min()), int(xs.max()) + 1, int(ys.max()) + 1)


def is_rectangular_selection(selection: Selection) -> bool:
    """
    Check whether every pixel inside the selection bounds is fully selected.

    A selection without a mask is rectangular by definition. Empty
    selections are reported as rectangular; emptiness is a separate error.
    Masks with an alpha band ("LA", "RGBA") are read from alpha; any other
    mode is converted to "L".
    """
    if selection.mask is None or selection.bounds.is_empty:
        return True
    region = np.asarray(_coverage(selection.mask).crop(selection.bounds.as_box()))
    return bool(np.all(region == FULLY_SELECTED))


def _coverage(mask: Image.Image) -> Image.Image:
    if "A" in mask.getbands():
        return mask.getchannel("A")
    return mask.convert("L")
