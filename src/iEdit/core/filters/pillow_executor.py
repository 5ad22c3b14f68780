"""Pillow-backed stages: tone lookup tables, affine resampling and blur.

Pillow applies lookup tables, transforms and Gaussian kernels in native code,
which keeps slider interaction responsive on full-resolution photos.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from PIL import Image, ImageFilter, ImageOps

from .algorithms import _apply_channel_adjustments, _float_to_uint8

_IDENTITY_TABLE = list(range(256))


def build_tone_lut(brightness_factor: float, contrast_factor: float) -> list[int]:
    """Pre-compute the brightness/contrast curve for every 8-bit channel value."""

    lut: list[int] = []
    for channel_value in range(256):
        normalised = channel_value / 255.0
        adjusted = _apply_channel_adjustments(normalised, brightness_factor, contrast_factor)
        lut.append(_float_to_uint8(adjusted))
    return lut


def apply_tone_lut(image: Image.Image, lut: Sequence[int]) -> Image.Image:
    """Return *image* (RGBA) with *lut* applied to the colour channels.

    The alpha channel receives an identity table so transparency is untouched.
    """

    table: list[int] = list(lut) * 3 + _IDENTITY_TABLE
    return image.point(table)


def resample_affine(
    image: Image.Image,
    size: tuple[int, int],
    coefficients: tuple[float, float, float, float, float, float],
) -> Image.Image:
    """Resample *image* into a transparent canvas of *size* via inverse *coefficients*.

    Pillow premultiplies RGBA before bilinear sampling, so colours bleeding in
    from the transparent border do not darken the edges.
    """

    return image.transform(
        size,
        Image.Transform.AFFINE,
        data=coefficients,
        resample=Image.Resampling.BILINEAR,
        fillcolor=(0, 0, 0, 0),
    )


def apply_gaussian_blur(image: Image.Image, radius: float) -> Image.Image:
    """Blur *image* with a Gaussian of standard deviation *radius* pixels.

    The kernel runs on premultiplied pixels (``RGBa``) so transparent padding
    contributes no colour, only coverage.  Everything beyond the canvas counts
    as transparent, so edges fade the same way whether or not the geometry
    stage left padding inside the canvas.
    """

    margin = int(math.ceil(3.0 * radius))
    premultiplied = ImageOps.expand(image.convert("RGBa"), border=margin, fill=(0, 0, 0, 0))
    blurred = premultiplied.filter(ImageFilter.GaussianBlur(radius=radius))
    width, height = image.size
    cropped = blurred.crop((margin, margin, margin + width, margin + height))
    return cropped.convert("RGBA")
