"""
Module: preview

Purpose:
    Tile preview pipeline. Resolves the tile from a document, plans the
    grid, composites the tiles and highlights the reference tile.

Key Functions:
    - run_preview(): Main entry point
    - resolve_source(): Tile extraction
    - plan_grid(): Canvas size and placements
    - composite_tiles(): Tiled canvas
    - annotate(): Reference tile highlight

Key Classes:
    - TileConfig: Rows/cols/gap configuration
    - PreviewSession: Orchestrator state machine
    - SessionResult: Session outcome

Dependencies:
    - PIL: Image manipulation
    - numpy: Alpha and mask analysis

Used By:
    - tile_preview.cli: Command line host
"""

from .config import TileConfig, load_tile_config
from .source import determine_mode, resolve_source
from .layout import GridPlan, canvas_size, plan_grid
from .output import annotate, composite_plan, composite_tiles
from .session import PreviewSession, SessionResult, SessionState, run_preview

__all__ = [
    # Config
    "TileConfig",
    "load_tile_config",
    # Source
    "determine_mode",
    "resolve_source",
    # Layout
    "GridPlan",
    "canvas_size",
    "plan_grid",
    # Output
    "annotate",
    "composite_plan",
    "composite_tiles",
    # Session
    "PreviewSession",
    "SessionResult",
    "SessionState",
    "run_preview",
]
