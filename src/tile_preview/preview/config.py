"""
Module: preview.config

Purpose:
    Tiling configuration: how many rows and columns to repeat the tile
    and how many pixels of gap to leave between neighbours.

Key Classes:
    - TileConfig: Immutable rows/cols/gap configuration

Key Functions:
    - load_tile_config(): Read a TileConfig from a JSON file

Dependencies:
    - dataclasses (std)
    - json (std)

Used By:
    - preview.layout.planner: Grid planning
    - preview.session: Session configuration
    - cli: Command line overrides
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Mapping

from tile_preview.core.errors import InvalidConfigError

logger = logging.getLogger(__name__)

# Defaults match the original tool: 5x5 grid, no gap
DEFAULT_ROWS = 5
DEFAULT_COLS = 5
DEFAULT_GAP = 0

_KNOWN_KEYS = frozenset({"rows", "cols", "gap"})


@dataclass(frozen=True)
class TileConfig:
    """
    Configuration for the tile grid (immutable).

    Values are not checked on construction so an out-of-range config can
    still reach the planner, which reports it as InvalidConfigError.
    Call ``validate()`` to check eagerly.

    Attributes:
        rows: Number of tile rows (>= 1)
        cols: Number of tile columns (>= 1)
        gap: Pixels between adjacent tiles (>= 0, 0 = no gap)

    Example:
        >>> config = TileConfig(rows=2, cols=3)
        >>> config.tile_count
        6
    """

    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS
    gap: int = DEFAULT_GAP

    @property
    def tile_count(self) -> int:
        return self.rows * self.cols

    @property
    def has_gap(self) -> bool:
        return self.gap > 0

    def validate(self) -> None:
        """
        Check the configuration.

        Raises:
            InvalidConfigError: If a value is not an integer or out of range
        """
        for name in ("rows", "cols", "gap"):
            value = getattr(self, name)
            # bool is an int subclass but never a meaningful count
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfigError(f"{name} must be an integer: {value!r}")
        if self.rows < 1:
            raise InvalidConfigError(f"rows must be >= 1: {self.rows}")
        if self.cols < 1:
            raise InvalidConfigError(f"cols must be >= 1: {self.cols}")
        if self.gap < 0:
            raise InvalidConfigError(f"gap must be >= 0: {self.gap}")

    def with_overrides(self, **overrides: Any) -> TileConfig:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TileConfig:
        """
        Build a config from a mapping, filling in defaults.

        ``gap`` may be ``false`` or ``null`` to mean no gap.

        Raises:
            InvalidConfigError: On unknown keys or invalid values
        """
        unknown = set(data) - _KNOWN_KEYS
        if unknown:
            raise InvalidConfigError(f"Unknown tiling settings: {sorted(unknown)}")

        gap = data.get("gap", DEFAULT_GAP)
        if gap is None or gap is False:
            gap = 0

        config = cls(
            rows=data.get("rows", DEFAULT_ROWS),
            cols=data.get("cols", DEFAULT_COLS),
            gap=gap,
        )
        config.validate()
        return config


def load_tile_config(path: Path) -> TileConfig:
    """
    Load a TileConfig from a JSON file.

    Args:
        path: JSON file containing an object with rows/cols/gap

    Returns:
        Validated TileConfig

    Raises:
        InvalidConfigError: If the file is unreadable, malformed or invalid
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise InvalidConfigError(f"Cannot read tiling settings {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidConfigError(f"Tiling settings file is corrupted: {e}") from e

    if not isinstance(data, dict):
        raise InvalidConfigError(f"Tiling settings must be a JSON object, got {type(data).__name__}")

    config = TileConfig.from_dict(data)
    logger.debug(f"Loaded tiling settings from {path}: {config}")
    return config
