"""
Module: preview.layout

Purpose:
    Grid planning for the tile preview.

Key Functions:
    - plan_grid(): Canvas size and row-major placements
    - canvas_size(): Canvas size only

Key Classes:
    - GridPlan: Planning result
"""

from .models import GridPlan
from .planner import canvas_size, plan_grid

__all__ = [
    "GridPlan",
    "canvas_size",
    "plan_grid",
]
