from __future__ import annotations

import os
import sys
from typing import Optional, Sequence

from PySide6.QtCore import QCoreApplication
from PySide6.QtWidgets import QApplication

ORG_ID = "plasmafractal"
APP_ID = "plasma-viewer"

VISIBLE_APP_NAME = "Plasma Fractal"


def create_app(argv: Optional[Sequence[str]] = None) -> QApplication:
    """Create and configure the QApplication instance, reusing a running one."""
    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")

    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setApplicationName(APP_ID)

    app = QApplication.instance()
    if app is None:
        app = QApplication(list(argv) if argv is not None else sys.argv)

    app.setApplicationDisplayName(VISIBLE_APP_NAME)
    return app
