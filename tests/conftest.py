import os
import sys
from io import BytesIO
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# GUI tests run without a display.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from iEdit.core.bitmap import Bitmap  # noqa: E402


def make_gradient(width: int = 8, height: int = 6) -> np.ndarray:
    """Return an opaque RGBA gradient with distinct colours in every pixel."""

    ys, xs = np.mgrid[0:height, 0:width]
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = (xs * 255 // max(width - 1, 1)).astype(np.uint8)
    pixels[..., 1] = (ys * 255 // max(height - 1, 1)).astype(np.uint8)
    pixels[..., 2] = ((xs + ys) * 17 % 256).astype(np.uint8)
    pixels[..., 3] = 255
    return pixels


def encode_png(pixels: np.ndarray) -> bytes:
    buffer = BytesIO()
    Image.fromarray(pixels).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def gradient_bitmap() -> Bitmap:
    return Bitmap.from_array(make_gradient(), source="gradient.png")


@pytest.fixture
def gradient_png() -> bytes:
    return encode_png(make_gradient())


@pytest.fixture
def gradient_file(tmp_path: Path, gradient_png: bytes) -> Path:
    path = tmp_path / "gradient.png"
    path.write_bytes(gradient_png)
    return path


@pytest.fixture
def make_bitmap():
    """Factory for gradient bitmaps of arbitrary size."""

    def _make(width: int = 8, height: int = 6) -> Bitmap:
        return Bitmap.from_array(make_gradient(width, height))

    return _make
