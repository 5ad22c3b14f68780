"""NumPy vectorised colour matrix executor."""

from __future__ import annotations

import numpy as np

from .algorithms import saturation_matrix


def apply_saturation_vectorized(pixels: np.ndarray, factor: float) -> np.ndarray:
    """Return a new ``(H, W, 4)`` array with the saturation matrix applied.

    The products are accumulated channel by channel rather than through a
    BLAS matrix multiply so the rounding is identical on every run.
    """

    matrix = saturation_matrix(factor)
    rgb = pixels[..., :3].astype(np.float64)
    red = rgb[..., 0]
    green = rgb[..., 1]
    blue = rgb[..., 2]

    result = np.empty_like(pixels)
    for channel in range(3):
        row = matrix[channel]
        mixed = red * row[0] + green * row[1] + blue * row[2]
        result[..., channel] = np.clip(np.rint(mixed), 0.0, 255.0).astype(np.uint8)
    result[..., 3] = pixels[..., 3]
    return result
