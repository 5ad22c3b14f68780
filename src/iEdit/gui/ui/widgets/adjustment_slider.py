"""Labelled slider bound to one adjustment parameter."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QLabel, QSlider, QVBoxLayout, QWidget

from ....core.adjustment_state import ParameterSpec


class AdjustmentSlider(QWidget):
    """Map a :class:`ParameterSpec` onto the integer ticks of a ``QSlider``.

    ``QSlider`` only handles integers, so each tick represents one ``step`` of
    the parameter (one unit for continuous parameters).  The state performs the
    authoritative clamping; the slider merely cannot express values outside
    the domain.
    """

    valueChanged = Signal(str, float)
    """Emitted with the parameter name and value when the user moves the handle."""

    def __init__(self, spec: ParameterSpec, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._spec = spec
        self._tick = float(spec.step or 1.0)
        self._value = float(spec.default)

        self._label = QLabel(self)
        self._slider = QSlider(Qt.Orientation.Horizontal, self)
        self._slider.setRange(0, self._to_ticks(spec.maximum))
        self._slider.setSingleStep(1)
        self._slider.setValue(self._to_ticks(spec.default))
        self._slider.valueChanged.connect(self._handle_slider_moved)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)
        layout.addWidget(self._label)
        layout.addWidget(self._slider)
        self._refresh_label()

    @property
    def name(self) -> str:
        return self._spec.name

    def value(self) -> float:
        return self._value

    def update_from_value(self, value: float) -> None:
        """Move the handle to *value* without emitting ``valueChanged``."""

        self._value = float(value)
        blocked = self._slider.blockSignals(True)
        try:
            self._slider.setValue(self._to_ticks(value))
        finally:
            self._slider.blockSignals(blocked)
        self._refresh_label()

    def _to_ticks(self, value: float) -> int:
        return int(round((float(value) - self._spec.minimum) / self._tick))

    def _from_ticks(self, ticks: int) -> float:
        return self._spec.minimum + ticks * self._tick

    def _handle_slider_moved(self, ticks: int) -> None:
        self._value = float(self._spec.coerce(self._from_ticks(ticks)))
        self._refresh_label()
        self.valueChanged.emit(self._spec.name, self._value)

    def _refresh_label(self) -> None:
        self._label.setText(self._spec.format(self._value))
