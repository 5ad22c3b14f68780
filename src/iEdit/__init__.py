"""iEdit: a small non-destructive image editor built around a compositing pipeline."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
