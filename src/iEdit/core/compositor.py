"""Compose a bitmap and its adjustments into a displayable surface.

The compositor is a pure function: it reads an immutable :class:`Bitmap` and
an immutable :class:`AdjustmentParameters` tuple and returns a brand new
:class:`RenderedSurface`.  Every call starts again from the original pixels,
which keeps the edits non-destructive and makes identical inputs produce
bit-identical output.

Stage order:

1. allocate a transparent canvas the size of the original bitmap
2. brightness, contrast and saturation on the source pixels
3. one centred affine transform (rotate clockwise, then scale), resampled
   bilinearly into the canvas
4. Gaussian blur on the composed canvas
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np
from PIL import Image

from ..config import MAX_SURFACE_PIXELS
from ..errors import RenderError
from .adjustment_state import DEFAULT_PARAMETERS, AdjustmentParameters
from .bitmap import Bitmap
from .filters import apply_blur, apply_color_adjustments
from .filters.pillow_executor import resample_affine
from .geometry import build_centered_transform, inverse_affine_coefficients, is_identity

_LOGGER = logging.getLogger(__name__)

AbortCheck = Callable[[], bool]


@dataclass(frozen=True, eq=False)
class RenderedSurface:
    """Output raster of one render, always sized like the source bitmap."""

    pixels: np.ndarray
    parameters: AdjustmentParameters
    generation: int = 0

    def __post_init__(self) -> None:
        if self.pixels.flags.writeable:
            self.pixels.setflags(write=False)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def to_pil(self) -> Image.Image:
        """Return a detached Pillow copy of the surface."""

        return Image.fromarray(np.array(self.pixels))

    def same_pixels(self, other: "RenderedSurface") -> bool:
        return self.pixels.shape == other.pixels.shape and bool(
            np.array_equal(self.pixels, other.pixels)
        )


def _check_abort(should_abort: Optional[AbortCheck], stage: str) -> None:
    if should_abort is not None and should_abort():
        raise RenderError(f"Render superseded before {stage}: the source bitmap was replaced")


def render(
    bitmap: Bitmap | None,
    parameters: AdjustmentParameters = DEFAULT_PARAMETERS,
    *,
    generation: int = 0,
    should_abort: Optional[AbortCheck] = None,
) -> RenderedSurface:
    """Return a new surface showing *bitmap* with *parameters* applied.

    ``should_abort`` is polled between stages; once it reports ``True`` the
    render stops with :class:`RenderError` so a stale job never finishes
    against a bitmap that has since been replaced.
    """

    if bitmap is None:
        raise RenderError("No image is loaded")

    width, height = bitmap.width, bitmap.height
    if width * height > MAX_SURFACE_PIXELS:
        raise RenderError(f"Surface of {width}x{height} pixels exceeds the allocation limit")

    try:
        # 1. Transparent canvas sized to the original bounding box.
        canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        _check_abort(should_abort, "colour adjustments")

        # 2. Per-pixel adjustments in the source's own colour space.
        layer = apply_color_adjustments(
            bitmap.to_pil(),
            parameters.brightness,
            parameters.contrast,
            parameters.saturation,
        )
        _check_abort(should_abort, "geometry")

        # 3. Rotation and scale about the centre as a single matrix.
        matrix = build_centered_transform(width, height, parameters.rotation, parameters.scale)
        if not is_identity(matrix):
            layer = resample_affine(layer, (width, height), inverse_affine_coefficients(matrix))
        canvas.paste(layer, (0, 0))
        _check_abort(should_abort, "blur")

        # 4. Spatial smoothing of the composed canvas.
        canvas = apply_blur(canvas, parameters.blur)
        pixels = np.asarray(canvas, dtype=np.uint8).copy()
    except RenderError:
        raise
    except (MemoryError, ValueError, OSError) as exc:
        raise RenderError(f"Failed to compose {width}x{height} surface: {exc}") from exc

    _LOGGER.debug("Rendered %dx%d surface with %s", width, height, parameters)
    return RenderedSurface(pixels, parameters, generation)


__all__ = ["AbortCheck", "RenderedSurface", "render"]
