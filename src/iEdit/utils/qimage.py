"""Conversions between numpy RGBA buffers and ``QImage``."""

from __future__ import annotations

import numpy as np
from PySide6.QtGui import QImage


def rgba_to_qimage(pixels: np.ndarray) -> QImage:
    """Return a detached ``QImage`` copy of an ``(H, W, 4)`` RGBA ``uint8`` array."""

    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError(f"Expected an (H, W, 4) array, got {pixels.shape}")
    height, width = pixels.shape[:2]
    # ``QImage`` only borrows the buffer it is built from.  Keep ``data`` alive
    # until the deep copy below owns its own pixels.
    data = np.ascontiguousarray(pixels, dtype=np.uint8).tobytes()
    view = QImage(data, width, height, width * 4, QImage.Format.Format_RGBA8888)
    image = view.copy()
    del view
    return image
