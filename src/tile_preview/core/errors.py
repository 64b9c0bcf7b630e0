"""
Module: core.errors

Purpose:
    Error taxonomy for the tile preview pipeline. Every failure a
    component can raise is one of these classes, so the session can
    report it with a stable kind and a dialog title.

Key Classes:
    - TilePreviewError: Base class (kind, title, message)
    - NoDocumentError, EmptySourceError, NonRectangularSelectionError
    - InvalidConfigError, CompositeFailureError, AnnotationError
    - UnsupportedHostError, UserCancelled

Used By:
    - preview.source.resolver, preview.layout.planner
    - preview.output.compositor, preview.output.annotator
    - preview.session: Converts errors into terminal states
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from tile_preview.core.models.canvas import PreviewCanvas


class TilePreviewError(Exception):
    """
    Base class for all tile preview errors.

    Attributes:
        kind: Stable machine-readable error kind (e.g. "empty_source")
        title: Short title for a user-facing alert
    """

    kind = "error"
    default_title = "Tile Preview"

    def __init__(self, message: str, *, title: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.title = title or self.default_title


class NoDocumentError(TilePreviewError):
    """There is no open document to preview."""

    kind = "no_document"
    default_title = "No Files Open"


class UnsupportedHostError(TilePreviewError):
    """Host application is older than the minimum supported version."""

    kind = "unsupported_host"
    default_title = "Incorrect Version"


class EmptySourceError(TilePreviewError):
    """The resolved image, layer or selection has zero width or height."""

    kind = "empty_source"
    default_title = "No Source Tile"


class NonRectangularSelectionError(TilePreviewError):
    """The active selection does not fill its bounding box."""

    kind = "non_rectangular_selection"
    default_title = "Unsupported Selection"


class InvalidConfigError(TilePreviewError, ValueError):
    """Tiling configuration is out of range."""

    kind = "invalid_config"
    default_title = "Invalid Tiling Settings"


class CompositeFailureError(TilePreviewError):
    """A tile could not be copied into the preview canvas."""

    kind = "composite_failure"
    default_title = "Unable to create tiles"


class AnnotationError(TilePreviewError):
    """
    The reference tile highlight could not be drawn.

    The composite itself is intact; it is attached as ``canvas`` so the
    caller may still show the preview without its boundary marker.
    """

    kind = "annotation_failure"
    default_title = "Unable to highlight"

    def __init__(
        self,
        message: str,
        *,
        canvas: Optional[PreviewCanvas] = None,
        title: Optional[str] = None,
    ):
        super().__init__(message, title=title)
        self.canvas = canvas


class UserCancelled(TilePreviewError):
    """User declined a confirmation prompt. Not a failure."""

    kind = "cancelled"
    default_title = "Cancelled"
