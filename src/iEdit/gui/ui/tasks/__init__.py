"""Background worker helpers for GUI tasks."""

from .preview_render_worker import PreviewRenderSignals, PreviewRenderWorker

__all__ = ["PreviewRenderSignals", "PreviewRenderWorker"]
