"""Immutable decoded rasters used as the compositing source."""

from __future__ import annotations

import io
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from ..errors import InvalidInputError

_LOGGER = logging.getLogger(__name__)

BitmapSource = Union[bytes, bytearray, memoryview, str, "os.PathLike[str]"]


@dataclass(frozen=True, eq=False)
class Bitmap:
    """Decoded RGBA pixels with fixed dimensions.

    ``pixels`` always has shape ``(height, width, 4)`` and dtype ``uint8``.  The
    array is flagged read-only so neither the compositor nor a caller can edit
    the source of truth in place; a new upload replaces the whole object.
    """

    pixels: np.ndarray
    source: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        pixels = self.pixels
        if not isinstance(pixels, np.ndarray):
            raise InvalidInputError("Bitmap pixels must be a numpy array")
        if pixels.ndim != 3 or pixels.shape[2] != 4 or pixels.dtype != np.uint8:
            raise InvalidInputError(
                f"Bitmap pixels must be (H, W, 4) uint8, got {pixels.shape} {pixels.dtype}"
            )
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise InvalidInputError("Bitmap has zero width or height")
        if pixels.flags.writeable:
            frozen = np.array(pixels, dtype=np.uint8, copy=True, order="C")
            frozen.setflags(write=False)
            object.__setattr__(self, "pixels", frozen)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        """Return ``(width, height)`` following Pillow's convention."""

        return self.width, self.height

    # ------------------------------------------------------------------
    @classmethod
    def from_array(cls, array: np.ndarray, *, source: str | None = None) -> "Bitmap":
        """Build a bitmap from a grey, RGB or RGBA ``uint8`` array."""

        data = np.asarray(array)
        if data.dtype != np.uint8:
            raise InvalidInputError(f"Unsupported pixel dtype {data.dtype}; expected uint8")
        if data.ndim == 2:
            data = np.stack([data, data, data], axis=-1)
        if data.ndim != 3 or data.shape[2] not in (3, 4):
            raise InvalidInputError(f"Unsupported pixel layout {data.shape}")
        if data.shape[2] == 3:
            alpha = np.full(data.shape[:2] + (1,), 255, dtype=np.uint8)
            data = np.concatenate([data, alpha], axis=-1)
        return cls(np.ascontiguousarray(data), source=source)

    @classmethod
    def from_pil(cls, image: Image.Image, *, source: str | None = None) -> "Bitmap":
        """Convert a Pillow image of any mode into an RGBA bitmap."""

        if image.width == 0 or image.height == 0:
            raise InvalidInputError("Image has zero width or height")
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        return cls(np.asarray(rgba, dtype=np.uint8).copy(), source=source)

    def to_pil(self) -> Image.Image:
        """Return a detached Pillow copy of the pixels."""

        return Image.fromarray(np.array(self.pixels))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bitmap):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and bool(
            np.array_equal(self.pixels, other.pixels)
        )

    __hash__ = object.__hash__


def decode_bitmap(data: BitmapSource, *, source: str | None = None) -> Bitmap:
    """Decode encoded image *data* (bytes or a path) into a :class:`Bitmap`.

    Only the first frame of animated formats is used and EXIF orientation is
    applied so the bitmap matches what an image viewer would show.  Anything
    Pillow cannot identify raises :class:`InvalidInputError`.
    """

    if isinstance(data, (str, os.PathLike)):
        path = Path(data)
        label = source or path.name
        try:
            payload = path.read_bytes()
        except OSError as exc:
            raise InvalidInputError(f"Cannot read image file {path}: {exc}") from exc
    else:
        label = source
        payload = bytes(data)

    if not payload:
        raise InvalidInputError("Image data is empty")

    try:
        with Image.open(io.BytesIO(payload)) as image:
            image.seek(0)
            image.load()
            oriented = ImageOps.exif_transpose(image)
            bitmap = Bitmap.from_pil(oriented, source=label)
    except InvalidInputError:
        raise
    except (UnidentifiedImageError, Image.DecompressionBombError) as exc:
        raise InvalidInputError(f"Unsupported or corrupt image data: {exc}") from exc
    except (OSError, ValueError, SyntaxError, EOFError) as exc:
        # Pillow reports truncated or malformed payloads through a mix of
        # these exception types depending on the codec.
        raise InvalidInputError(f"Failed to decode image: {exc}") from exc

    _LOGGER.debug("Decoded %s as %dx%d bitmap", label or "<bytes>", bitmap.width, bitmap.height)
    return bitmap


__all__ = ["Bitmap", "BitmapSource", "decode_bitmap"]
