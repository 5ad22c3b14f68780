"""Encode rendered surfaces into standard raster files."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from ..config import (
    ALPHA_EXPORT_FORMATS,
    EXPORT_FILENAME,
    EXPORT_FORMAT,
    EXPORT_SUFFIXES,
    SUPPORTED_EXPORT_FORMATS,
)
from ..errors import EncodeError
from ..utils.fileio import atomic_write_bytes
from .compositor import RenderedSurface

_LOGGER = logging.getLogger(__name__)


def _normalise_format(fmt: str) -> str:
    name = fmt.strip().upper()
    if name == "JPG":
        name = "JPEG"
    if name not in SUPPORTED_EXPORT_FORMATS:
        raise EncodeError(
            f"Unsupported export format {fmt!r}; choose one of {', '.join(SUPPORTED_EXPORT_FORMATS)}"
        )
    return name


def _flatten(image: Image.Image) -> Image.Image:
    """Composite *image* onto opaque black for formats without alpha."""

    background = Image.new("RGBA", image.size, (0, 0, 0, 255))
    return Image.alpha_composite(background, image).convert("RGB")


def export_surface(surface: Optional[RenderedSurface], fmt: str = EXPORT_FORMAT) -> bytes:
    """Return *surface* encoded as *fmt* (PNG by default).

    Raises :class:`EncodeError` when no surface has been rendered yet, which the
    UI maps onto a disabled download action.
    """

    if surface is None:
        raise EncodeError("Nothing to export: no image has been rendered")

    name = _normalise_format(fmt)
    image = surface.to_pil()
    if name not in ALPHA_EXPORT_FORMATS:
        image = _flatten(image)

    buffer = io.BytesIO()
    try:
        image.save(buffer, format=name)
    except (OSError, ValueError, KeyError) as exc:
        raise EncodeError(f"Failed to encode surface as {name}: {exc}") from exc
    return buffer.getvalue()


def format_for_path(path: Path) -> str:
    """Return the export format implied by *path*'s suffix (PNG when unknown)."""

    return EXPORT_SUFFIXES.get(path.suffix.lower(), EXPORT_FORMAT)


def save_surface(
    surface: Optional[RenderedSurface],
    path: Union[str, Path, None] = None,
    *,
    fmt: Optional[str] = None,
) -> Path:
    """Write *surface* to *path* (``edited-image.png`` by default) and return it."""

    target = Path(path) if path is not None else Path(EXPORT_FILENAME)
    if target.is_dir():
        target = target / EXPORT_FILENAME
    payload = export_surface(surface, fmt or format_for_path(target))
    atomic_write_bytes(target, payload)
    _LOGGER.info("Exported %d bytes to %s", len(payload), target)
    return target


__all__ = ["export_surface", "format_for_path", "save_surface"]
