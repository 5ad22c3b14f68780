"""Core compositing pipeline: state, compositor, export and scheduling."""

from __future__ import annotations

from .adjustment_state import (
    ADJUSTMENT_KEYS,
    DEFAULT_PARAMETERS,
    PARAMETER_SPECS,
    AdjustmentParameters,
    AdjustmentState,
)
from .bitmap import Bitmap, decode_bitmap
from .compositor import RenderedSurface, render
from .export import export_surface, save_surface
from .render_scheduler import RenderJob, RenderScheduler
from .session import EditSession

__all__ = [
    "ADJUSTMENT_KEYS",
    "AdjustmentParameters",
    "AdjustmentState",
    "Bitmap",
    "DEFAULT_PARAMETERS",
    "EditSession",
    "PARAMETER_SPECS",
    "RenderJob",
    "RenderScheduler",
    "RenderedSurface",
    "decode_bitmap",
    "export_surface",
    "render",
    "save_surface",
]
