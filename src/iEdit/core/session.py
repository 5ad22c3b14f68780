"""Headless editing session tying the state, the scheduler and export together."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from .adjustment_state import AdjustmentParameters, AdjustmentState
from .bitmap import Bitmap, BitmapSource
from .compositor import RenderedSurface
from .export import export_surface, save_surface
from .render_scheduler import Dispatcher, RenderScheduler


class EditSession:
    """One editing session: a loaded image, its adjustments and the latest render.

    Mutations go through :class:`AdjustmentState`; the attached
    :class:`RenderScheduler` re-renders after each of them, so ``surface``
    always reflects the newest completed render.
    """

    def __init__(self, dispatch: Optional[Dispatcher] = None) -> None:
        self.state = AdjustmentState()
        self.scheduler = RenderScheduler(self.state, dispatch)
        self.scheduler.attach()

    def load(self, source: Bitmap | BitmapSource) -> Bitmap:
        return self.state.load(source)

    def set_parameter(self, name: str, value: Any) -> AdjustmentParameters:
        return self.state.set_parameter(name, value)

    def update(self, **values: Any) -> AdjustmentParameters:
        return self.state.update(**values)

    def reset(self) -> AdjustmentParameters:
        return self.state.reset()

    @property
    def bitmap(self) -> Optional[Bitmap]:
        return self.state.current_bitmap()

    @property
    def parameters(self) -> AdjustmentParameters:
        return self.state.current_parameters()

    @property
    def surface(self) -> Optional[RenderedSurface]:
        return self.scheduler.latest_surface()

    def export(self, fmt: str = "PNG") -> bytes:
        return export_surface(self.surface, fmt)

    def save(self, path: Union[str, Path, None] = None, *, fmt: Optional[str] = None) -> Path:
        return save_surface(self.surface, path, fmt=fmt)

    def close(self) -> None:
        self.scheduler.detach()
        self.scheduler.cancel_outstanding()
