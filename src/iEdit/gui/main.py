"""Application bootstrap for the editor window."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Sequence

from PySide6.QtWidgets import QApplication

from ..config import APP_NAME
from ..utils.logging import get_logger
from .ui.widgets.image_editor_window import ImageEditorWindow


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Open the editor window, optionally pre-loading the first path in *argv*."""

    args = list(sys.argv[1:] if argv is None else argv)
    logger = get_logger()

    app = QApplication.instance() or QApplication([sys.argv[0], *args])
    app.setApplicationName(APP_NAME)

    window = ImageEditorWindow()
    window.resize(1200, 800)
    window.show()
    if args:
        path = Path(args[0])
        logger.info("Opening %s", path)
        window.open_image(path)

    return app.exec()


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
