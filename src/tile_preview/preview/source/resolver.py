"""
Module: preview.source.resolver

Purpose:
    Decide which part of the document becomes the tile and extract its
    pixels. Exactly one source mode is chosen per session:

        SELECTION  if the document has a selection
        LAYER      else if it has more than one layer or any layer group
        IMAGE      otherwise (the whole flattened document)

Key Functions:
    - determine_mode(): Pick the SourceMode for a document
    - resolve_source(): Main entry point, mode plus tile pixels

Dependencies:
    - document.rendering: Side-effect free layer/group rasterisation

Used By:
    - preview.session: RESOLVE_SOURCE step
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Callable, Optional

from tile_preview.core.errors import (
    EmptySourceError,
    NoDocumentError,
    NonRectangularSelectionError,
    UserCancelled,
)
from tile_preview.core.models.source import ResolvedSource, SourceMode
from tile_preview.document.models import Document
from tile_preview.document.rendering import (
    content_bounds,
    flatten_document,
    is_rectangular_selection,
    render_node,
)

logger = logging.getLogger(__name__)

# (message, title) -> True to continue
ConfirmCallback = Callable[[str, str], bool]

GROUP_PROMPT = (
    "This will preview tiling of the selected layer group.\n"
    "Are you sure you want to continue?"
)
GROUP_PROMPT_TITLE = "Tile Layer Group?"


def determine_mode(document: Document) -> SourceMode:
    """
    Pick the source mode for a document.

    A selection always wins, regardless of how many layers there are.

    Example:
        >>> determine_mode(Document.from_image(img))
        <SourceMode.IMAGE: 'IMAGE'>
    """
    if document.has_selection:
        return SourceMode.SELECTION
    if document.layer_count > 1 or document.has_groups:
        return SourceMode.LAYER
    return SourceMode.IMAGE


def resolve_source(
    document: Optional[Document],
    confirm: Optional[ConfirmCallback] = None,
) -> ResolvedSource:
    """
    Resolve the tile for a document.

    The document is only read: layer groups are flattened into new
    images and nothing is added to or removed from the layer tree.

    Args:
        document: Active document, or None if nothing is open
        confirm: Yes/no prompt used before tiling a layer group.
            Without a prompt, tiling a group is treated as declined.

    Returns:
        ResolvedSource with non-empty tile pixels

    Raises:
        NoDocumentError: If there is no document
        EmptySourceError: If the image, layer or selection is empty
        NonRectangularSelectionError: If the selection does not fill its bounds
        UserCancelled: If tiling a layer group was declined
    """
    if document is None:
        raise NoDocumentError("There is no open file to preview.")

    _check_has_artwork(document)

    mode = determine_mode(document)
    logger.debug(f"Source mode for '{document.name}': {mode.value}")

    if mode is SourceMode.SELECTION:
        source = _resolve_selection(document)
    elif mode is SourceMode.LAYER:
        source = _resolve_layer(document, confirm)
    else:
        source = _resolve_image(document)

    logger.info(
        f"Resolved {mode.value} source {source.dimensions.width}x{source.dimensions.height}"
        + (f" from '{source.layer_name}'" if source.layer_name else "")
    )
    return source


def _check_has_artwork(document: Document) -> None:
    """Reject a single-layer document whose only layer is blank."""
    if len(document.layers) > 1:
        return
    if document.layers and not content_bounds(render_node(document.layers[0], document.size)).is_empty:
        return
    raise EmptySourceError(
        "The image contains no artwork.\n"
        "Please select a different image, or add artwork.",
        title="No Artwork",
    )


def _resolve_image(document: Document) -> ResolvedSource:
    image = flatten_document(document)
    return ResolvedSource(
        mode=SourceMode.IMAGE,
        image=image,
        region=document.bounds,
    )


def _resolve_layer(document: Document, confirm: Optional[ConfirmCallback]) -> ResolvedSource:
    layer = document.active_layer
    if layer is None:
        raise EmptySourceError("The document has no active layer.", title="No Layer Content")

    pixels = render_node(layer, document.size)
    bounds = content_bounds(pixels)
    if bounds.is_empty:
        raise EmptySourceError(
            "The current layer is empty.\n"
            "Please select a different layer, or add content.",
            title="No Layer Content",
        )

    if layer.is_group:
        if confirm is None or not confirm(GROUP_PROMPT, GROUP_PROMPT_TITLE):
            raise UserCancelled(f"Tiling of layer group '{layer.name}' declined")
        logger.debug(f"Confirmed tiling of layer group '{layer.name}'")

    return ResolvedSource(
        mode=SourceMode.LAYER,
        image=pixels.crop(bounds.as_box()),
        region=bounds,
        layer_name=layer.name,
        from_group=layer.is_group,
    )


def _resolve_selection(document: Document) -> ResolvedSource:
    selection = document.selection
    bounds = selection.bounds.intersect(document.bounds)
    if bounds.is_empty:
        raise EmptySourceError(
            f"The selection is empty ({selection.bounds.width}x{selection.bounds.height}).\n"
            "Please make a larger selection.",
            title="Empty Selection",
        )

    if selection.mask is not None and selection.mask.size != (document.width, document.height):
        mask_width, mask_height = selection.mask.size
        raise NonRectangularSelectionError(
            f"The selection mask is {mask_width}x{mask_height} but the document is "
            f"{document.width}x{document.height}.\n"
            "The mask must cover the whole document."
        )

    if not is_rectangular_selection(dataclasses.replace(selection, bounds=bounds)):
        raise NonRectangularSelectionError(
            "Only rectangular selections can be previewed.\n"
            "Please make a rectangular selection."
        )

    layer = document.active_layer
    if layer is not None:
        pixels = render_node(layer, document.size)
    else:
        pixels = flatten_document(document)

    return ResolvedSource(
        mode=SourceMode.SELECTION,
        image=pixels.crop(bounds.as_box()),
        region=bounds,
        layer_name=layer.name if layer is not None else None,
        from_group=layer is not None and layer.is_group,
    )
