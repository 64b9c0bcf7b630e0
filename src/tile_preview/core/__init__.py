"""
Core package: shared models and the error taxonomy.
"""

from .errors import (
    TilePreviewError,
    NoDocumentError,
    UnsupportedHostError,
    EmptySourceError,
    NonRectangularSelectionError,
    InvalidConfigError,
    CompositeFailureError,
    AnnotationError,
    UserCancelled,
)

__all__ = [
    "TilePreviewError",
    "NoDocumentError",
    "UnsupportedHostError",
    "EmptySourceError",
    "NonRectangularSelectionError",
    "InvalidConfigError",
    "CompositeFailureError",
    "AnnotationError",
    "UserCancelled",
]
