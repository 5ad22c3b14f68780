"""Affine transform helpers for centred rotation and uniform scaling.

Coordinates follow the raster convention: ``x`` grows to the right, ``y``
grows downwards and pixel ``(i, j)`` covers the unit square starting at
``(i, j)``.  With ``y`` pointing down a positive angle in the usual rotation
matrix turns content clockwise on screen.
"""

from __future__ import annotations

import math

import numpy as np


def translation_matrix(tx: float, ty: float) -> np.ndarray:
    return np.array([[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]], dtype=np.float64)


def rotation_matrix(degrees: float) -> np.ndarray:
    """Return the homogeneous matrix rotating clockwise by *degrees* on screen."""

    turns = float(degrees) % 360.0
    # Exact values for quarter turns keep 90° steps free of resampling drift.
    exact = {0.0: (1.0, 0.0), 90.0: (0.0, 1.0), 180.0: (-1.0, 0.0), 270.0: (0.0, -1.0)}
    if turns in exact:
        cos_a, sin_a = exact[turns]
    else:
        radians = math.radians(turns)
        cos_a, sin_a = math.cos(radians), math.sin(radians)
    return np.array(
        [[cos_a, -sin_a, 0.0], [sin_a, cos_a, 0.0], [0.0, 0.0, 1.0]],
        dtype=np.float64,
    )


def scale_matrix(factor: float) -> np.ndarray:
    return np.array(
        [[factor, 0.0, 0.0], [0.0, factor, 0.0], [0.0, 0.0, 1.0]],
        dtype=np.float64,
    )


def build_centered_transform(
    width: int,
    height: int,
    rotation: float,
    scale: float,
) -> np.ndarray:
    """Return the forward matrix mapping source points into the output canvas.

    The matrix is ``T(c) · R(rotation) · S(scale) · T(-c)`` where ``c`` is the
    centre of the ``width`` x ``height`` canvas, i.e. the image is rotated and
    then scaled about its own centre.
    """

    if scale <= 0.0:
        raise ValueError(f"scale must be positive, got {scale}")
    cx = width / 2.0
    cy = height / 2.0
    return (
        translation_matrix(cx, cy)
        @ rotation_matrix(rotation)
        @ scale_matrix(scale)
        @ translation_matrix(-cx, -cy)
    )


def is_identity(matrix: np.ndarray, tolerance: float = 1e-12) -> bool:
    return bool(np.allclose(matrix, np.eye(3), rtol=0.0, atol=tolerance))


def inverse_affine_coefficients(matrix: np.ndarray) -> tuple[float, float, float, float, float, float]:
    """Return the ``(a, b, c, d, e, f)`` tuple Pillow expects for ``Image.AFFINE``.

    Pillow samples the *source* position for every output pixel, so the
    coefficients come from the inverse of the forward matrix.
    """

    inverse = np.linalg.inv(matrix)
    a, b, c = inverse[0]
    d, e, f = inverse[1]
    return float(a), float(b), float(c), float(d), float(e), float(f)


def transform_point(matrix: np.ndarray, x: float, y: float) -> tuple[float, float]:
    """Map ``(x, y)`` through *matrix*."""

    px, py, pw = matrix @ np.array([x, y, 1.0], dtype=np.float64)
    return float(px / pw), float(py / pw)


__all__ = [
    "build_centered_transform",
    "inverse_affine_coefficients",
    "is_identity",
    "rotation_matrix",
    "scale_matrix",
    "transform_point",
    "translation_matrix",
]
