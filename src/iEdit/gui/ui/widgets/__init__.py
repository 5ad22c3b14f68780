"""Widgets composing the editor window."""

from .adjustment_slider import AdjustmentSlider
from .image_editor_window import ImageEditorWindow
from .preview_canvas import PreviewCanvas

__all__ = ["AdjustmentSlider", "ImageEditorWindow", "PreviewCanvas"]
