"""Ordered entry points for the photometric stages.

``apply_color_adjustments`` runs brightness, contrast and saturation on the
source pixels; ``apply_blur`` runs last on the composed surface.  Both return
new images and skip work entirely when a stage sits at its neutral value.
"""

from __future__ import annotations

import numpy as np
from PIL import Image

from .numpy_executor import apply_saturation_vectorized
from .pillow_executor import apply_gaussian_blur, apply_tone_lut, build_tone_lut


def apply_color_adjustments(
    image: Image.Image,
    brightness: float,
    contrast: float,
    saturation: float,
) -> Image.Image:
    """Return a copy of the RGBA *image* with the per-pixel adjustments applied.

    Parameters
    ----------
    image:
        Source image in ``RGBA`` mode.  It is never modified.
    brightness, contrast, saturation:
        Percentages where ``100`` leaves the channel unchanged.
    """

    brightness_factor = float(brightness) / 100.0
    contrast_factor = float(contrast) / 100.0
    saturation_factor = float(saturation) / 100.0

    result = image
    if brightness_factor != 1.0 or contrast_factor != 1.0:
        lut = build_tone_lut(brightness_factor, contrast_factor)
        result = apply_tone_lut(result, lut)

    if saturation_factor != 1.0:
        pixels = np.asarray(result, dtype=np.uint8)
        result = Image.fromarray(apply_saturation_vectorized(pixels, saturation_factor))

    if result is image:
        # Nothing to do; hand back a detached copy so callers can mutate freely.
        return image.copy()
    return result


def apply_blur(image: Image.Image, radius: float) -> Image.Image:
    """Return *image* blurred by *radius* pixels (a copy when *radius* is zero)."""

    if radius <= 0.0:
        return image.copy()
    return apply_gaussian_blur(image, float(radius))
