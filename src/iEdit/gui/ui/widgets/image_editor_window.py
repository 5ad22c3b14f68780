"""Top-level editor window: upload, adjust, preview and download."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

from PySide6.QtCore import Slot
from PySide6.QtGui import QCloseEvent, QImage
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ....config import APP_NAME
from ....core.adjustment_state import ADJUSTMENT_KEYS, PARAMETER_SPECS, AdjustmentParameters
from ..controllers.edit_preview_controller import EditPreviewController
from .adjustment_slider import AdjustmentSlider
from .dialogs import select_export_path, select_image_file, show_error
from .preview_canvas import PreviewCanvas

_LOGGER = logging.getLogger(__name__)


class ImageEditorWindow(QWidget):
    """Editor window wiring the sliders and buttons to an :class:`EditPreviewController`."""

    def __init__(
        self,
        controller: Optional[EditPreviewController] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Image Editor")
        self._controller = controller or EditPreviewController(self)
        self._sliders: Dict[str, AdjustmentSlider] = {}
        self._last_directory: Optional[Path] = None

        self.upload_button = QPushButton("Upload Image", self)
        self.upload_button.clicked.connect(self._handle_upload_clicked)

        self._controls = QWidget(self)
        controls_layout = QVBoxLayout(self._controls)
        controls_layout.setContentsMargins(0, 0, 0, 0)
        controls_layout.setSpacing(20)
        controls_layout.addWidget(QLabel("Edit Controls", self._controls))
        for key in ADJUSTMENT_KEYS:
            slider = AdjustmentSlider(PARAMETER_SPECS[key], self._controls)
            slider.valueChanged.connect(self._controller.set_parameter)
            controls_layout.addWidget(slider)
            self._sliders[key] = slider

        self.reset_button = QPushButton("Reset", self._controls)
        self.reset_button.clicked.connect(self._controller.reset)
        self.download_button = QPushButton("Download", self._controls)
        self.download_button.setEnabled(False)
        self.download_button.clicked.connect(self._handle_download_clicked)
        buttons = QHBoxLayout()
        buttons.setSpacing(10)
        buttons.addWidget(self.reset_button)
        buttons.addWidget(self.download_button)
        controls_layout.addLayout(buttons)
        controls_layout.addStretch(1)
        self._controls.setVisible(False)

        self.canvas = PreviewCanvas(self)

        body = QHBoxLayout()
        body.setSpacing(30)
        body.addWidget(self._controls, 1)
        body.addWidget(self.canvas, 2)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(40, 40, 40, 40)
        layout.addWidget(self.upload_button)
        layout.addLayout(body, 1)

        self._controller.previewChanged.connect(self._handle_preview_changed)
        self._controller.parametersChanged.connect(self._handle_parameters_changed)
        self._controller.imageAvailable.connect(self._handle_image_available)
        self._controller.errorOccurred.connect(self._handle_error)

    @property
    def controller(self) -> EditPreviewController:
        return self._controller

    def slider(self, name: str) -> AdjustmentSlider:
        return self._sliders[name]

    def open_image(self, path: Path) -> bool:
        self._last_directory = path.parent
        return self._controller.load_file(path)

    # ------------------------------------------------------------------
    # Signal handlers
    # ------------------------------------------------------------------
    @Slot()
    def _handle_upload_clicked(self) -> None:
        path = select_image_file(self, self._last_directory)
        if path is not None:
            self.open_image(path)

    @Slot()
    def _handle_download_clicked(self) -> None:
        path = select_export_path(self, self._last_directory)
        if path is None:
            return
        written = self._controller.export_to(path)
        if written is not None:
            _LOGGER.info("Saved edited image to %s", written)

    @Slot(QImage)
    def _handle_preview_changed(self, image: QImage) -> None:
        self.canvas.set_image(image)
        self.download_button.setEnabled(True)

    @Slot(object)
    def _handle_parameters_changed(self, parameters: AdjustmentParameters) -> None:
        for key, slider in self._sliders.items():
            slider.update_from_value(getattr(parameters, key))

    @Slot(bool)
    def _handle_image_available(self, available: bool) -> None:
        self._controls.setVisible(available)

    @Slot(str)
    def _handle_error(self, message: str) -> None:
        show_error(self, message, title=APP_NAME)

    def closeEvent(self, event: QCloseEvent) -> None:  # type: ignore[override]
        self._controller.shutdown()
        super().closeEvent(event)
