"""
Module: preview.source

Purpose:
    Source resolution: choose IMAGE, LAYER or SELECTION mode and extract
    the tile pixels.
"""

from .resolver import (
    GROUP_PROMPT,
    GROUP_PROMPT_TITLE,
    ConfirmCallback,
    determine_mode,
    resolve_source,
)

__all__ = [
    "GROUP_PROMPT",
    "GROUP_PROMPT_TITLE",
    "ConfirmCallback",
    "determine_mode",
    "resolve_source",
]
