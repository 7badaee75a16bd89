"""
Command-line entry point: parses render settings, configures logging and
starts the plasma viewer (or the colour curve plot).
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from plasmafractal.config import DEFAULT_HEIGHT, DEFAULT_WIDTH, DisplacementMode, RenderSettings
from plasmafractal.logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plasmafractal",
        description="Show a random plasma fractal. Click the image to draw a new one.",
    )
    parser.add_argument("--width", type=int, default=DEFAULT_WIDTH, help="canvas width in pixels")
    parser.add_argument("--height", type=int, default=DEFAULT_HEIGHT, help="canvas height in pixels")
    parser.add_argument("--seed", type=int, default=None, help="seed for reproducible images")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in DisplacementMode],
        default=DisplacementMode.SCALED.value,
        help="displacement model",
    )
    parser.add_argument("--log-level", default="INFO", help="logging level name")
    parser.add_argument("--log-file", default=None, help="also write logs to this file")
    parser.add_argument("--plot-colors", action="store_true", help="plot the colour curves and exit")
    return parser


def parse_settings(args: argparse.Namespace) -> RenderSettings:
    return RenderSettings(width=args.width, height=args.height, seed=args.seed, mode=args.mode)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the application."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        setup_logging(level=args.log_level, log_file=args.log_file)
        settings = parse_settings(args)
    except ValueError as e:
        parser.error(str(e))

    if args.plot_colors:
        from plasmafractal.core.color import plot_color_curves
        plot_color_curves()
        return 0

    import pyqtgraph as pg

    from plasmafractal.app.application import create_app
    from plasmafractal.app.ui.main_window import MainWindow

    pg.setConfigOption("background", "w")
    pg.setConfigOption("foreground", "k")

    logger.info(f"Starting viewer with {settings.width}x{settings.height} canvas, seed={settings.seed}.")
    app = create_app([sys.argv[0]])
    win = MainWindow(settings)
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
