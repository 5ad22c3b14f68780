"""Widget that displays the rendered preview while preserving aspect ratio."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QImage, QPixmap, QResizeEvent
from PySide6.QtWidgets import QLabel, QSizePolicy, QWidget

_PLACEHOLDER = "Upload an image to start editing"


class PreviewCanvas(QLabel):
    """Show the newest frame scaled down to fit, never stretched."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._pixmap: Optional[QPixmap] = None
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setMinimumSize(400, 300)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        # Transparent padding from rotation/scale should read as empty canvas.
        self.setStyleSheet("background-color: #f5f5f5; color: #888; font-size: 18px;")
        self.setText(_PLACEHOLDER)

    def set_image(self, image: QImage) -> None:
        """Replace the displayed frame with *image*."""

        if image.isNull():
            return
        self._pixmap = QPixmap.fromImage(image)
        self._update_scaled_pixmap()

    def has_image(self) -> bool:
        return self._pixmap is not None

    def resizeEvent(self, event: QResizeEvent) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._update_scaled_pixmap()

    def _update_scaled_pixmap(self) -> None:
        if self._pixmap is None:
            return
        target = self.contentsRect().size()
        pixmap = self._pixmap
        if pixmap.width() > target.width() or pixmap.height() > target.height():
            pixmap = pixmap.scaled(
                target,
                Qt.AspectRatioMode.KeepAspectRatio,
                Qt.TransformationMode.SmoothTransformation,
            )
        self.setPixmap(pixmap)
