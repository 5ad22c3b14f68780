"""Helpers for writing exported files atomically."""

from __future__ import annotations

import os
import time
from pathlib import Path


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Atomically write *data* into *path*."""

    tmp_path = path.with_suffix(path.suffix + ".tmp")
    path.parent.mkdir(parents=True, exist_ok=True)
    with tmp_path.open("wb") as handle:
        handle.write(data)
        handle.flush()
        os.fsync(handle.fileno())
    # ``Path.replace`` can fail transiently on Windows while another process
    # (antivirus, indexing, an image viewer) holds the destination open.  Retry
    # with a short back-off and never unlink the existing destination.
    for attempt in range(5):
        try:
            tmp_path.replace(path)
            return
        except PermissionError:
            if attempt == 4:
                tmp_path.unlink(missing_ok=True)
                raise
            time.sleep(0.05 * (attempt + 1))
