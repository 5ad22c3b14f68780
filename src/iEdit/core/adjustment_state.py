"""Adjustment parameters and the mutable state that owns the active bitmap."""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass, replace
from typing import Any, Callable, Literal, Mapping

from ..errors import InvalidInputError, InvalidParameterError
from .bitmap import Bitmap, BitmapSource, decode_bitmap

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParameterSpec:
    """Domain of a single adjustment control."""

    name: str
    label: str
    minimum: float
    maximum: float
    step: float | None
    default: float
    unit: str
    integer: bool = False

    def coerce(self, value: Any) -> float | int:
        """Return *value* snapped to the step grid and clamped to the domain."""

        if isinstance(value, bool):
            raise InvalidParameterError(f"{self.name} expects a number, got {value!r}")
        try:
            numeric = float(value)
        except (TypeError, ValueError) as exc:
            raise InvalidParameterError(f"{self.name} expects a number, got {value!r}") from exc
        if math.isnan(numeric):
            raise InvalidParameterError(f"{self.name} cannot be NaN")

        if self.step is not None and math.isfinite(numeric):
            steps = round((numeric - self.minimum) / self.step)
            numeric = self.minimum + steps * self.step
            numeric = round(numeric, _decimals(self.step))
        numeric = min(self.maximum, max(self.minimum, numeric))
        if self.integer:
            return int(numeric)
        return float(numeric)

    def format(self, value: float) -> str:
        """Return the label text shown next to the control, e.g. ``Scale: 1.50x``."""

        if self.name == "scale":
            return f"{self.label}: {value:.2f}{self.unit}"
        if self.integer or float(value).is_integer():
            return f"{self.label}: {int(value)}{self.unit}"
        return f"{self.label}: {value:g}{self.unit}"


def _decimals(step: float) -> int:
    text = f"{step:.10f}".rstrip("0")
    return len(text.split(".")[1]) if "." in text else 0


PARAMETER_SPECS: Mapping[str, ParameterSpec] = {
    "brightness": ParameterSpec("brightness", "Brightness", 0, 200, 1, 100, "%", integer=True),
    "contrast": ParameterSpec("contrast", "Contrast", 0, 200, 1, 100, "%", integer=True),
    "saturation": ParameterSpec("saturation", "Saturation", 0, 200, 1, 100, "%", integer=True),
    "blur": ParameterSpec("blur", "Blur", 0.0, 20.0, None, 0.0, "px"),
    "rotation": ParameterSpec("rotation", "Rotation", 0, 360, 1, 0, "°", integer=True),
    "scale": ParameterSpec("scale", "Scale", 0.1, 2.0, 0.1, 1.0, "x"),
}
"""Range, step and default of every control.  Sliders and the CLI read this too."""

ADJUSTMENT_KEYS = tuple(PARAMETER_SPECS)
"""Canonical parameter order used for snapshots, the UI and the CLI."""


@dataclass(frozen=True)
class AdjustmentParameters:
    """Immutable tuple of the six adjustment values."""

    brightness: int = 100
    contrast: int = 100
    saturation: int = 100
    blur: float = 0.0
    rotation: int = 0
    scale: float = 1.0

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "AdjustmentParameters":
        """Validate *values* and return a parameter tuple (missing keys keep defaults)."""

        return cls().with_values(values)

    def with_values(self, values: Mapping[str, Any]) -> "AdjustmentParameters":
        """Return a copy with *values* coerced into their domains."""

        coerced: dict[str, float | int] = {}
        for name, value in values.items():
            spec = PARAMETER_SPECS.get(name)
            if spec is None:
                raise InvalidParameterError(f"Unknown adjustment parameter: {name!r}")
            coerced[name] = spec.coerce(value)
        return replace(self, **coerced)

    def as_tuple(self) -> tuple[float | int, ...]:
        return tuple(getattr(self, key) for key in ADJUSTMENT_KEYS)

    @property
    def is_identity(self) -> bool:
        """``True`` when rendering would reproduce the source pixels exactly."""

        return self.has_identity_geometry and self.has_identity_photometry

    @property
    def has_identity_geometry(self) -> bool:
        return self.rotation % 360 == 0 and self.scale == 1.0

    @property
    def has_identity_photometry(self) -> bool:
        return (
            self.brightness == 100
            and self.contrast == 100
            and self.saturation == 100
            and self.blur == 0.0
        )


DEFAULT_PARAMETERS = AdjustmentParameters()


@dataclass(frozen=True)
class StateSnapshot:
    """Consistent view of the state taken under a single lock acquisition."""

    bitmap: Bitmap | None
    parameters: AdjustmentParameters
    generation: int
    revision: int


ChangeKind = Literal["load", "parameter", "reset"]
StateListener = Callable[[StateSnapshot, ChangeKind], None]


class AdjustmentState:
    """Single source of truth for the active bitmap and its adjustments.

    Every mutation replaces the stored :class:`AdjustmentParameters` value
    as a whole under a lock, so readers either see the previous tuple or the
    new one.  ``generation`` increases whenever the bitmap is replaced and
    ``revision`` on every mutation; render jobs record both to detect that
    they were superseded.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._bitmap: Bitmap | None = None
        self._parameters = DEFAULT_PARAMETERS
        self._generation = 0
        self._revision = 0
        self._listeners: list[StateListener] = []

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def load(self, source: Bitmap | BitmapSource) -> Bitmap:
        """Replace the active bitmap and reset every parameter to its default."""

        if isinstance(source, Bitmap):
            bitmap = source
        elif isinstance(source, (bytes, bytearray, memoryview, str)) or hasattr(source, "__fspath__"):
            bitmap = decode_bitmap(source)
        else:
            raise InvalidInputError(f"Cannot load image from {type(source).__name__}")

        with self._lock:
            self._bitmap = bitmap
            self._parameters = DEFAULT_PARAMETERS
            self._generation += 1
            self._revision += 1
            snapshot = self._snapshot_locked()
        _LOGGER.info(
            "Loaded %s (%dx%d), generation %d",
            bitmap.source or "bitmap",
            bitmap.width,
            bitmap.height,
            snapshot.generation,
        )
        self._notify(snapshot, "load")
        return bitmap

    def set_parameter(self, name: str, value: Any) -> AdjustmentParameters:
        """Store *value* for *name* after snapping and clamping it into its domain."""

        return self.update(**{name: value})

    def update(self, **values: Any) -> AdjustmentParameters:
        """Apply several parameters at once; nothing is stored if any is invalid."""

        with self._lock:
            updated = self._parameters.with_values(values)
            if updated == self._parameters:
                return updated
            self._parameters = updated
            self._revision += 1
            snapshot = self._snapshot_locked()
        self._notify(snapshot, "parameter")
        return updated

    def reset(self) -> AdjustmentParameters:
        """Restore every parameter to its default; the bitmap is left alone."""

        with self._lock:
            self._parameters = DEFAULT_PARAMETERS
            self._revision += 1
            snapshot = self._snapshot_locked()
        self._notify(snapshot, "reset")
        return DEFAULT_PARAMETERS

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def current_bitmap(self) -> Bitmap | None:
        with self._lock:
            return self._bitmap

    def current_parameters(self) -> AdjustmentParameters:
        with self._lock:
            return self._parameters

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def snapshot(self) -> StateSnapshot:
        """Return bitmap, parameters and counters observed atomically."""

        with self._lock:
            return self._snapshot_locked()

    def _snapshot_locked(self) -> StateSnapshot:
        return StateSnapshot(self._bitmap, self._parameters, self._generation, self._revision)

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------
    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call *listener* after every mutation; returns an unsubscribe callable."""

        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, snapshot: StateSnapshot, kind: ChangeKind) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(snapshot, kind)


__all__ = [
    "ADJUSTMENT_KEYS",
    "AdjustmentParameters",
    "AdjustmentState",
    "DEFAULT_PARAMETERS",
    "PARAMETER_SPECS",
    "ParameterSpec",
    "StateSnapshot",
]
