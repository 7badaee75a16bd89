"""
Background Workers (Threading)
==============================
This module contains QThread subclasses for handling long-running tasks.

Why is this file needed?
------------------------
1. Responsiveness: Large canvases take a noticeable moment to subdivide. Running
   the renderer on the main thread would freeze the window.
2. Signals: They hand the finished image (and the timing) back to the GUI
   thread using Qt Signals.

Classes:
    PlasmaWorker: Runs one plasma generation.
"""
import logging
import time

from PySide6.QtCore import QThread, Signal

from plasmafractal.core.renderer import PlasmaRenderer

logger = logging.getLogger(__name__)


class PlasmaWorker(QThread):
    # Signals to update the UI from the background
    image_ready = Signal(object, float)  # (H x W x 3 uint8 array, elapsed milliseconds)
    error_occurred = Signal(str)

    def __init__(self, renderer: PlasmaRenderer, width: int, height: int, parent=None):
        super().__init__(parent)
        self.renderer = renderer
        self.canvas_width = width
        self.canvas_height = height

    def run(self) -> None:
        try:
            logger.info(f"Rendering {self.canvas_width}x{self.canvas_height} plasma in background thread...")
            start = time.perf_counter()
            image = self.renderer.render_image(self.canvas_width, self.canvas_height)
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            logger.info(f"Plasma computed in {elapsed_ms:.0f} ms.")
            self.image_ready.emit(image, elapsed_ms)
        except Exception as e:
            logger.error(f"Error in PlasmaWorker: {e}")
            self.error_occurred.emit(str(e))
