"""Photometric filters for the compositing pipeline.

The package separates the concerns the same way the preview pipeline does:
- algorithms: pure per-channel maths shared by every executor
- pillow_executor: lookup tables, affine resampling and blur in Pillow's C code
- numpy_executor: vectorised colour matrices
- facade: the ordered entry points used by the compositor
"""

from __future__ import annotations

from .facade import apply_blur, apply_color_adjustments

__all__ = ["apply_blur", "apply_color_adjustments"]
