"""Controller keeping the preview canvas in sync with the adjustment state."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from PySide6.QtCore import QObject, QThreadPool, QTimer, Signal, Slot
from PySide6.QtGui import QImage

from ....config import PREVIEW_DEBOUNCE_MS
from ....core.adjustment_state import AdjustmentParameters, AdjustmentState, ChangeKind, StateSnapshot
from ....core.compositor import RenderedSurface
from ....core.export import save_surface
from ....core.render_scheduler import RenderJob, RenderScheduler
from ....errors import IEditError, RenderError
from ....utils.qimage import rgba_to_qimage
from ..tasks.preview_render_worker import PreviewRenderSignals, PreviewRenderWorker

_LOGGER = logging.getLogger(__name__)


class EditPreviewController(QObject):
    """Own the editing state and publish the newest rendered preview.

    Slider movements arrive in bursts, so parameter changes are coalesced with a
    single-shot timer before a render is scheduled.  Loading an image bypasses
    the timer: outstanding renders are cancelled and a fresh one starts at
    once.  Renders run on ``thread_pool`` unless ``synchronous`` is set, in
    which case they complete before the mutating call returns.
    """

    previewChanged = Signal(QImage)
    """Emitted with the newest rendered frame."""

    surfaceChanged = Signal(object)
    """Emitted with the :class:`RenderedSurface` backing the newest frame."""

    parametersChanged = Signal(object)
    """Emitted with the current :class:`AdjustmentParameters` after any mutation."""

    imageAvailable = Signal(bool)
    """Emitted when an image becomes available for editing and export."""

    errorOccurred = Signal(str)
    """Emitted with a user-facing message for any recoverable failure."""

    def __init__(
        self,
        parent: Optional[QObject] = None,
        *,
        thread_pool: Optional[QThreadPool] = None,
        debounce_ms: int = PREVIEW_DEBOUNCE_MS,
        synchronous: bool = False,
    ) -> None:
        super().__init__(parent)
        self._state = AdjustmentState()
        self._thread_pool = thread_pool or QThreadPool.globalInstance()
        self._synchronous = synchronous
        self._scheduler = RenderScheduler(
            self._state,
            None if synchronous else self._dispatch_to_pool,
        )
        # Keep each worker's signal object alive until its job reports back.
        self._active_signals: dict[int, PreviewRenderSignals] = {}

        self._debounce_ms = max(0, int(debounce_ms))
        self._render_timer = QTimer(self)
        self._render_timer.setSingleShot(True)
        self._render_timer.timeout.connect(self._scheduler.request_render)

        self._scheduler.on_surface(self._handle_surface_published)
        self._scheduler.on_error(self._handle_render_error)
        self._state.subscribe(self._handle_state_changed)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def state(self) -> AdjustmentState:
        return self._state

    def parameters(self) -> AdjustmentParameters:
        return self._state.current_parameters()

    def has_image(self) -> bool:
        return self._state.current_bitmap() is not None

    def latest_surface(self) -> Optional[RenderedSurface]:
        return self._scheduler.latest_surface()

    def load_file(self, path: Union[str, Path]) -> bool:
        """Load *path* as the new image; report failures through ``errorOccurred``."""

        try:
            self._state.load(Path(path))
        except IEditError as exc:
            _LOGGER.warning("Rejected image %s: %s", path, exc)
            self.errorOccurred.emit(str(exc))
            return False
        return True

    @Slot(str, float)
    def set_parameter(self, name: str, value: float) -> None:
        try:
            self._state.set_parameter(name, value)
        except IEditError as exc:
            self.errorOccurred.emit(str(exc))

    @Slot()
    def reset(self) -> None:
        self._state.reset()

    def export_to(self, path: Union[str, Path, None] = None) -> Optional[Path]:
        """Write the newest surface to *path*; return ``None`` if nothing was written."""

        try:
            return save_surface(self._scheduler.latest_surface(), path)
        except (IEditError, OSError) as exc:
            self.errorOccurred.emit(str(exc))
            return None

    def shutdown(self) -> None:
        """Stop scheduling and drop any in-flight results."""

        self._render_timer.stop()
        self._scheduler.cancel_outstanding()

    # ------------------------------------------------------------------
    # State and scheduler callbacks
    # ------------------------------------------------------------------
    def _handle_state_changed(self, snapshot: StateSnapshot, kind: ChangeKind) -> None:
        self.parametersChanged.emit(snapshot.parameters)
        if kind == "load":
            self._render_timer.stop()
            self._scheduler.cancel_outstanding()
            self.imageAvailable.emit(True)
            self._scheduler.request_render()
            return
        if self._synchronous or self._debounce_ms == 0:
            self._scheduler.request_render()
        else:
            self._render_timer.start(self._debounce_ms)

    def _dispatch_to_pool(self, job: RenderJob) -> None:
        worker = PreviewRenderWorker(job, self._scheduler.render_job)
        worker.signals.finished.connect(self._handle_worker_finished)
        worker.signals.failed.connect(self._handle_worker_failed)
        self._active_signals[job.job_id] = worker.signals
        self._thread_pool.start(worker)

    @Slot(int, object)
    def _handle_worker_finished(self, job_id: int, surface: RenderedSurface) -> None:
        self._active_signals.pop(job_id, None)
        self._scheduler.complete(job_id, surface)

    @Slot(int, object)
    def _handle_worker_failed(self, job_id: int, error: RenderError) -> None:
        self._active_signals.pop(job_id, None)
        self._scheduler.fail(job_id, error)

    def _handle_surface_published(self, surface: RenderedSurface) -> None:
        self.surfaceChanged.emit(surface)
        self.previewChanged.emit(rgba_to_qimage(surface.pixels))

    def _handle_render_error(self, error: RenderError) -> None:
        # The previous frame stays on screen; only the message is surfaced.
        self.errorOccurred.emit(str(error))

