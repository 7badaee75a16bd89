"""
Main window: the plasma image, a toolbar to regenerate and a status bar with timings.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Slot
from PySide6.QtGui import QAction
from PySide6.QtWidgets import QLabel, QMainWindow, QStatusBar, QToolBar

from plasmafractal.app.application import VISIBLE_APP_NAME
from plasmafractal.app.ui.plasma_view import PlasmaView
from plasmafractal.app.workers import PlasmaWorker
from plasmafractal.config import RenderSettings

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, settings: Optional[RenderSettings] = None):
        super().__init__()
        self.settings = settings or RenderSettings()
        self.renderer = self.settings.make_renderer()
        self._worker: Optional[PlasmaWorker] = None

        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(self.settings.width + 40, self.settings.height + 80)

        # ---- Central: the image ----
        self.view = PlasmaView(self)
        self.view.clicked.connect(self.on_trigger)
        self.setCentralWidget(self.view)

        # ---- Toolbar ----
        tb = QToolBar(self)
        tb.setMovable(False)
        self.addToolBar(tb)

        self.act_regenerate = QAction(self.tr("Regenerate"), self)
        self.act_regenerate.setShortcut("Space")
        self.act_regenerate.triggered.connect(self.on_trigger)
        tb.addAction(self.act_regenerate)

        # ---- Status ----
        sb = QStatusBar(self)
        self.size_label = QLabel(f"{self.settings.width} x {self.settings.height} px, {self.settings.mode.value}")
        sb.addPermanentWidget(self.size_label)
        self.setStatusBar(sb)

        self.on_trigger()

    def is_busy(self) -> bool:
        return self._worker is not None and self._worker.isRunning()

    @Slot()
    def on_trigger(self) -> None:
        """Start a new plasma generation unless one is already running."""
        if self.is_busy():
            logger.debug("Generation already in progress, ignoring trigger.")
            return

        self.act_regenerate.setEnabled(False)
        self.statusBar().showMessage(self.tr("Computing..."))

        worker = PlasmaWorker(self.renderer, self.settings.width, self.settings.height, parent=self)
        worker.image_ready.connect(self._on_image_ready)
        worker.error_occurred.connect(self._on_error)
        worker.finished.connect(self._on_worker_finished)
        self._worker = worker
        worker.start()

    @Slot(object, float)
    def _on_image_ready(self, image, elapsed_ms: float) -> None:
        self.view.set_image(image)
        self.statusBar().showMessage(self.tr("Computed in {0} ms").format(round(elapsed_ms)))

    @Slot(str)
    def _on_error(self, message: str) -> None:
        self.statusBar().showMessage(self.tr("Generation failed: {0}").format(message))

    @Slot()
    def _on_worker_finished(self) -> None:
        if self._worker is not None:
            self._worker.deleteLater()
        self._worker = None
        self.act_regenerate.setEnabled(True)

    def wait_for_worker(self, timeout_ms: int = 30000) -> bool:
        """Block until the running generation finishes. Used on close and in tests."""
        if self._worker is None:
            return True
        return self._worker.wait(timeout_ms)

    def closeEvent(self, event) -> None:
        self.wait_for_worker()
        super().closeEvent(event)
