import numpy as np
import pytest

pytest.importorskip("PySide6")
pytest.importorskip("pyqtgraph")

from PySide6.QtWidgets import QApplication  # noqa: E402

from plasmafractal.app.application import create_app  # noqa: E402
from plasmafractal.app.workers import PlasmaWorker  # noqa: E402
from plasmafractal.config import RenderSettings  # noqa: E402
from plasmafractal.core.renderer import PlasmaRenderer  # noqa: E402


@pytest.fixture(scope="module")
def app():
    return create_app([])


def test_worker_emits_image(app):
    images = []
    worker = PlasmaWorker(PlasmaRenderer(seed=6), 24, 16)
    worker.image_ready.connect(lambda image, ms: images.append((image, ms)))
    worker.run()

    image, elapsed = images[0]
    assert image.shape == (16, 24, 3)
    assert elapsed >= 0.0
    np.testing.assert_array_equal(image, PlasmaRenderer(seed=6).render_image(24, 16))


def test_worker_reports_errors(app):
    errors = []
    worker = PlasmaWorker(PlasmaRenderer(seed=6), 0, 16)
    worker.error_occurred.connect(errors.append)
    worker.run()
    assert errors and "width" in errors[0]


def test_main_window_shows_generated_image(app):
    from plasmafractal.app.ui.main_window import MainWindow

    win = MainWindow(RenderSettings(width=32, height=20, seed=1))
    assert win.wait_for_worker()
    QApplication.processEvents()
    QApplication.processEvents()

    image = win.view.image()
    assert image is not None
    assert image.shape == (20, 32, 3)
    assert "Computed in" in win.statusBar().currentMessage()

    first = image.copy()
    win.on_trigger()
    assert win.wait_for_worker()
    QApplication.processEvents()
    QApplication.processEvents()
    assert not np.array_equal(win.view.image(), first)
    win.close()
