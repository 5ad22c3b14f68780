"""Reusable dialog helpers for the editor window."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from PySide6.QtGui import QPalette
from PySide6.QtWidgets import QApplication, QFileDialog, QMessageBox, QWidget

from ....config import APP_NAME, EXPORT_FILENAME, IMAGE_FILE_FILTER


def select_image_file(parent: QWidget, start: Optional[Path] = None) -> Optional[Path]:
    """Return an image file chosen by the user or ``None`` when cancelled."""

    directory = str(start) if start is not None else ""
    path, _ = QFileDialog.getOpenFileName(parent, "Upload Image", directory, IMAGE_FILE_FILTER)
    if not path:
        return None
    return Path(path)


def select_export_path(parent: QWidget, start: Optional[Path] = None) -> Optional[Path]:
    """Ask where to save the edited image, pre-filled with ``edited-image.png``."""

    suggestion = (start / EXPORT_FILENAME) if start is not None else Path(EXPORT_FILENAME)
    path, _ = QFileDialog.getSaveFileName(
        parent,
        "Download",
        str(suggestion),
        "PNG image (*.png);;JPEG image (*.jpg *.jpeg);;WebP image (*.webp)",
    )
    if not path:
        return None
    return Path(path)


def _apply_theme(box: QMessageBox, parent: Optional[QWidget]) -> None:
    """Apply the active theme colors to the message box."""
    if parent:
        palette = parent.palette()
    else:
        palette = QApplication.palette()

    bg_color = palette.color(QPalette.ColorRole.Window).name()
    text_color = palette.color(QPalette.ColorRole.WindowText).name()
    box.setStyleSheet(
        f"QMessageBox {{ background-color: {bg_color}; color: {text_color}; }}"
        f"QLabel {{ color: {text_color}; }}"
    )


def show_error(parent: QWidget, message: str, *, title: str = APP_NAME) -> None:
    """Display a blocking error message."""

    box = QMessageBox(QMessageBox.Icon.Critical, title, message, QMessageBox.StandardButton.Ok, parent)
    _apply_theme(box, parent)
    box.exec()
