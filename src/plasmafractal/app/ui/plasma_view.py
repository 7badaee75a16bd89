"""Widget displaying the plasma image."""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import pyqtgraph as pg
from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QVBoxLayout, QWidget

if TYPE_CHECKING:
    import numpy.typing as npt


class ClickableImageItem(pg.ImageItem):
    """ImageItem that reports left clicks instead of drawing on the image."""
    clicked = Signal()

    def mouseClickEvent(self, ev) -> None:
        if ev.button() == Qt.MouseButton.LeftButton:
            ev.accept()
            self.clicked.emit()
        else:
            super().mouseClickEvent(ev)


class PlasmaView(QWidget):
    """
    Read-only view of the latest plasma image.

    The image is kept pixel exact: y axis points down, aspect ratio is locked
    and mouse pan/zoom is disabled so a click always means "regenerate".
    """
    clicked = Signal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.graphics = pg.GraphicsLayoutWidget()
        self.view_box = self.graphics.addViewBox()
        self.view_box.setAspectLocked(True)
        self.view_box.invertY(True)
        self.view_box.setMouseEnabled(x=False, y=False)
        self.view_box.setMenuEnabled(False)

        self.image_item = ClickableImageItem(axisOrder="row-major")
        self.view_box.addItem(self.image_item)
        self.image_item.clicked.connect(self.clicked.emit)

        layout.addWidget(self.graphics)

        self._image: npt.NDArray[np.uint8] | None = None

    def set_image(self, image: npt.NDArray[np.uint8]) -> None:
        """Show an (H, W, 3) uint8 image."""
        self._image = image
        self.image_item.setImage(image, autoLevels=False, levels=(0, 255))
        self.view_box.autoRange(padding=0.0)

    def image(self) -> npt.NDArray[np.uint8] | None:
        return self._image
