from pathlib import Path

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for GUI tests", exc_type=ImportError)
pytest.importorskip("PySide6.QtWidgets", reason="Qt widgets not available", exc_type=ImportError)

from PySide6.QtGui import QImage
from PySide6.QtWidgets import QApplication

from iEdit.core.adjustment_state import DEFAULT_PARAMETERS, PARAMETER_SPECS, StateSnapshot
from iEdit.core.bitmap import decode_bitmap
from iEdit.core.render_scheduler import RenderJob
from iEdit.errors import RenderError
from iEdit.gui.ui.controllers.edit_preview_controller import EditPreviewController
from iEdit.gui.ui.tasks.preview_render_worker import PreviewRenderWorker
from iEdit.gui.ui.widgets.adjustment_slider import AdjustmentSlider
from iEdit.gui.ui.widgets.image_editor_window import ImageEditorWindow
from iEdit.utils.qimage import rgba_to_qimage


@pytest.fixture(scope="module")
def qapp() -> QApplication:
    import os

    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def controller(qapp: QApplication) -> EditPreviewController:
    controller = EditPreviewController(synchronous=True)
    yield controller
    controller.shutdown()


def test_load_publishes_preview(controller: EditPreviewController, gradient_file: Path) -> None:
    previews: list[QImage] = []
    available: list[bool] = []
    controller.previewChanged.connect(previews.append)
    controller.imageAvailable.connect(available.append)

    assert controller.load_file(gradient_file)

    assert available == [True]
    assert len(previews) == 1
    assert (previews[0].width(), previews[0].height()) == (8, 6)
    assert controller.has_image()


def test_parameter_changes_are_clamped_and_rendered(
    controller: EditPreviewController, gradient_file: Path
) -> None:
    emitted = []
    controller.parametersChanged.connect(emitted.append)
    controller.load_file(gradient_file)

    controller.set_parameter("brightness", 500)

    assert controller.parameters().brightness == 200
    assert emitted[-1].brightness == 200
    assert controller.latest_surface().parameters.brightness == 200


def test_invalid_file_reports_error(controller: EditPreviewController, tmp_path: Path) -> None:
    errors: list[str] = []
    controller.errorOccurred.connect(errors.append)
    bogus = tmp_path / "bogus.png"
    bogus.write_bytes(b"nope")

    assert not controller.load_file(bogus)
    assert errors
    assert not controller.has_image()


def test_export_requires_an_image(controller: EditPreviewController, tmp_path: Path) -> None:
    errors: list[str] = []
    controller.errorOccurred.connect(errors.append)
    assert controller.export_to(tmp_path / "out.png") is None
    assert errors


def test_export_writes_latest_surface(
    controller: EditPreviewController, gradient_file: Path, tmp_path: Path
) -> None:
    controller.load_file(gradient_file)
    controller.set_parameter("rotation", 90)
    written = controller.export_to(tmp_path / "out.png")
    assert written == tmp_path / "out.png"
    assert decode_bitmap(written).size == (8, 6)


def test_threaded_controller_renders_in_background(qapp: QApplication, gradient_file: Path) -> None:
    controller = EditPreviewController(debounce_ms=0)
    previews: list[QImage] = []
    controller.previewChanged.connect(previews.append)
    controller.load_file(gradient_file)

    for _ in range(200):
        if previews:
            break
        controller._thread_pool.waitForDone(25)
        qapp.processEvents()

    assert previews
    controller.shutdown()


def test_worker_reports_failures(qapp: QApplication, gradient_bitmap) -> None:
    job = RenderJob(7, StateSnapshot(gradient_bitmap, DEFAULT_PARAMETERS, 1, 1))

    def explode(_job: RenderJob):
        raise RenderError("boom")

    worker = PreviewRenderWorker(job, explode)
    worker.setAutoDelete(False)
    failures = []
    worker.signals.failed.connect(lambda job_id, error: failures.append((job_id, str(error))))
    worker.run()

    assert failures == [(7, "boom")]


def test_rgba_to_qimage(gradient_bitmap, qapp: QApplication) -> None:
    image = rgba_to_qimage(gradient_bitmap.pixels)
    colour = image.pixelColor(3, 2)
    assert (colour.red(), colour.green(), colour.blue(), colour.alpha()) == tuple(
        int(value) for value in gradient_bitmap.pixels[2, 3]
    )


def test_slider_maps_ticks_to_values(qapp: QApplication) -> None:
    slider = AdjustmentSlider(PARAMETER_SPECS["scale"])
    changes = []
    slider.valueChanged.connect(lambda name, value: changes.append((name, value)))

    slider._slider.setValue(14)

    assert changes == [("scale", pytest.approx(1.5))]
    assert slider._label.text() == "Scale: 1.50x"

    slider.update_from_value(0.1)
    assert len(changes) == 1
    assert slider._slider.value() == 0
    assert slider._label.text() == "Scale: 0.10x"


def test_window_syncs_sliders_with_state(qapp: QApplication, gradient_file: Path) -> None:
    controller = EditPreviewController(synchronous=True)
    window = ImageEditorWindow(controller)

    assert window.open_image(gradient_file)
    assert not window._controls.isHidden()
    assert window.canvas.has_image()
    assert window.download_button.isEnabled()

    controller.set_parameter("rotation", 90)
    assert window.slider("rotation").value() == 90

    window.reset_button.click()
    assert controller.parameters() == DEFAULT_PARAMETERS
    assert window.slider("rotation").value() == 0
    window.close()
