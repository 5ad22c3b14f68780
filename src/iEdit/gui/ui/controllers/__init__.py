"""Controllers mediating between the editing state and the widgets."""

from .edit_preview_controller import EditPreviewController

__all__ = ["EditPreviewController"]
