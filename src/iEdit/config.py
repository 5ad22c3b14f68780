"""Static configuration for the editor.

The editor keeps no cross-session state: every value here is a constant so the
behaviour of a session never depends on the environment it runs in.
"""

from __future__ import annotations

EXPORT_FILENAME = "edited-image.png"
"""Default file name used when the user downloads the edited image."""

EXPORT_FORMAT = "PNG"

SUPPORTED_EXPORT_FORMATS = ("PNG", "JPEG", "WEBP", "BMP", "TIFF")
"""Formats accepted by :func:`iEdit.core.export.export_surface`."""

ALPHA_EXPORT_FORMATS = frozenset({"PNG", "WEBP", "TIFF"})
"""Formats able to store the transparent padding produced by rotation/scale."""

EXPORT_SUFFIXES = {
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".webp": "WEBP",
    ".bmp": "BMP",
    ".tif": "TIFF",
    ".tiff": "TIFF",
}

IMAGE_FILE_FILTER = (
    "Images (*.png *.jpg *.jpeg *.gif *.bmp *.webp *.tif *.tiff);;All files (*)"
)
"""Qt file dialog filter for the upload button."""

MAX_SURFACE_PIXELS = 178_956_970
"""Largest surface the compositor will allocate (Pillow's decompression bomb limit)."""

PREVIEW_DEBOUNCE_MS = 16
"""Delay used to coalesce bursts of slider events into a single render."""

APP_NAME = "iEdit"
