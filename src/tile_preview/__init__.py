"""Top-level package for Tile Preview.

Provides subpackages:
- tile_preview.core – geometry, canvas and source models plus the error taxonomy
- tile_preview.document – in-memory host document model and rendering helpers
- tile_preview.preview – resolver, grid planner, compositor, annotator and session
- tile_preview.host – host environment and notifier collaborators
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tile_preview")
except PackageNotFoundError:
    # Running from a source checkout without installing
    __version__ = "0.0.0"

__all__: list[str] = ["__version__"]
