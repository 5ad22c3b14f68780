"""Worker that executes preview renders on a background thread."""

from __future__ import annotations

import logging
from typing import Callable

from PySide6.QtCore import QObject, QRunnable, Signal

from ....core.compositor import RenderedSurface
from ....core.render_scheduler import RenderJob
from ....errors import RenderError

_LOGGER = logging.getLogger(__name__)


class PreviewRenderSignals(QObject):
    """Signals emitted by :class:`PreviewRenderWorker`."""

    finished = Signal(int, object)
    """Emitted with the job identifier and the rendered :class:`RenderedSurface`."""

    failed = Signal(int, object)
    """Emitted with the job identifier and the :class:`RenderError` that aborted it."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)


class PreviewRenderWorker(QRunnable):
    """Run one :class:`RenderJob` through the compositor off the GUI thread."""

    def __init__(
        self,
        job: RenderJob,
        renderer: Callable[[RenderJob], RenderedSurface],
    ) -> None:
        super().__init__()
        self.setAutoDelete(True)
        self._job = job
        self._renderer = renderer
        self.signals = PreviewRenderSignals()

    @property
    def job(self) -> RenderJob:
        return self._job

    def run(self) -> None:  # type: ignore[override]
        """Render the job and notify listeners when done."""

        job_id = self._job.job_id
        try:
            surface = self._renderer(self._job)
        except RenderError as exc:
            self.signals.failed.emit(job_id, exc)
        except Exception as exc:  # pragma: no cover - safety net for unexpected codec errors
            _LOGGER.exception("Preview render %d crashed", job_id)
            self.signals.failed.emit(job_id, RenderError(str(exc)))
        else:
            self.signals.finished.emit(job_id, surface)


__all__ = ["PreviewRenderSignals", "PreviewRenderWorker"]
