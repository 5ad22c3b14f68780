"""Keep the published surface in sync with :class:`AdjustmentState`.

The scheduler is the explicit "state changed -> re-render -> publish" loop.
Each render request snapshots the state, receives a strictly increasing job
identifier and is handed to a dispatch callable.  The default dispatcher
renders inline; the GUI supplies one that runs the job on a ``QThreadPool``
and reports back through :meth:`RenderScheduler.complete` or
:meth:`RenderScheduler.fail`.

Cancellation is advisory: a superseded job may keep running, but its result is
dropped on arrival.  Only the newest job issued against the current bitmap can
ever be published, so results never appear out of order.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from ..errors import RenderError
from .adjustment_state import AdjustmentParameters, AdjustmentState, ChangeKind, StateSnapshot
from .bitmap import Bitmap
from .compositor import RenderedSurface, render

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderJob:
    """A render request bound to one consistent state snapshot."""

    job_id: int
    snapshot: StateSnapshot

    @property
    def bitmap(self) -> Bitmap:
        if self.snapshot.bitmap is None:
            raise RenderError("No image is loaded")
        return self.snapshot.bitmap

    @property
    def parameters(self) -> AdjustmentParameters:
        return self.snapshot.parameters

    @property
    def generation(self) -> int:
        return self.snapshot.generation


Dispatcher = Callable[[RenderJob], None]
SurfaceListener = Callable[[RenderedSurface], None]
ErrorListener = Callable[[RenderError], None]


class RenderScheduler:
    """Issue render jobs for *state* and publish only the newest result."""

    def __init__(self, state: AdjustmentState, dispatch: Optional[Dispatcher] = None) -> None:
        self._state = state
        self._dispatch: Dispatcher = dispatch or self.render_inline
        self._lock = threading.RLock()
        self._next_job_id = 0
        self._latest_job_id = 0
        self._cancel_watermark = 0
        self._outstanding: dict[int, int] = {}
        self._surface: RenderedSurface | None = None
        self._published_job_id = 0
        self._surface_listeners: list[SurfaceListener] = []
        self._error_listeners: list[ErrorListener] = []
        self._unsubscribe: Optional[Callable[[], None]] = None

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------
    def attach(self) -> None:
        """Schedule a render after every state mutation."""

        if self._unsubscribe is None:
            self._unsubscribe = self._state.subscribe(self._handle_state_changed)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def on_surface(self, listener: SurfaceListener) -> Callable[[], None]:
        """Call *listener* with every newly published surface."""

        self._surface_listeners.append(listener)
        return lambda: self._surface_listeners.remove(listener)

    def on_error(self, listener: ErrorListener) -> Callable[[], None]:
        """Call *listener* when the newest job fails."""

        self._error_listeners.append(listener)
        return lambda: self._error_listeners.remove(listener)

    def _handle_state_changed(self, snapshot: StateSnapshot, kind: ChangeKind) -> None:
        if kind == "load":
            self.cancel_outstanding()
        self.request_render()

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------
    def request_render(self) -> Optional[RenderJob]:
        """Snapshot the state and dispatch a new job; ``None`` without a bitmap."""

        snapshot = self._state.snapshot()
        if snapshot.bitmap is None:
            return None
        with self._lock:
            self._next_job_id += 1
            job = RenderJob(self._next_job_id, snapshot)
            self._latest_job_id = job.job_id
            self._outstanding[job.job_id] = job.generation
        self._dispatch(job)
        return job

    def cancel_outstanding(self) -> None:
        """Discard the results of every job issued so far."""

        with self._lock:
            if self._outstanding:
                _LOGGER.debug("Cancelling %d outstanding render(s)", len(self._outstanding))
            self._cancel_watermark = self._next_job_id
            self._outstanding.clear()

    def is_current(self, job_id: int) -> bool:
        """Return ``True`` if a result for *job_id* would still be published."""

        with self._lock:
            return self._is_current_locked(job_id)

    def _is_current_locked(self, job_id: int) -> bool:
        if job_id != self._latest_job_id or job_id <= self._cancel_watermark:
            return False
        if job_id <= self._published_job_id:
            return False
        generation = self._outstanding.get(job_id)
        return generation is not None and generation == self._state.generation

    def has_pending(self) -> bool:
        with self._lock:
            return bool(self._outstanding)

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------
    def complete(self, job_id: int, surface: RenderedSurface) -> bool:
        """Publish *surface* if *job_id* is still the newest job; return whether it was."""

        with self._lock:
            current = self._is_current_locked(job_id)
            self._outstanding.pop(job_id, None)
            if not current:
                _LOGGER.debug("Dropping superseded render %d", job_id)
                return False
            self._surface = surface
            self._published_job_id = job_id
            listeners = list(self._surface_listeners)
        for listener in listeners:
            listener(surface)
        return True

    def fail(self, job_id: int, error: RenderError) -> bool:
        """Report *error* for *job_id*; the previous surface stays published."""

        with self._lock:
            current = self._is_current_locked(job_id)
            self._outstanding.pop(job_id, None)
            if not current:
                _LOGGER.debug("Ignoring failure of superseded render %d: %s", job_id, error)
                return False
            listeners = list(self._error_listeners)
        _LOGGER.warning("Render %d failed: %s", job_id, error)
        for listener in listeners:
            listener(error)
        return True

    def latest_surface(self) -> Optional[RenderedSurface]:
        with self._lock:
            return self._surface

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    def render_job(self, job: RenderJob) -> RenderedSurface:
        """Run the compositor for *job*, aborting if its bitmap gets replaced."""

        return render(
            job.bitmap,
            job.parameters,
            generation=job.generation,
            should_abort=lambda: self._state.generation != job.generation,
        )

    def render_inline(self, job: RenderJob) -> None:
        """Default dispatcher: render synchronously and report the outcome."""

        try:
            surface = self.render_job(job)
        except RenderError as exc:
            self.fail(job.job_id, exc)
        else:
            self.complete(job.job_id, surface)


__all__ = ["Dispatcher", "RenderJob", "RenderScheduler"]
