"""
Plasma Fractal Engine
=====================
The core implementation of the plasma texture generator.

Why is this package needed?
---------------------------
1. Algorithm: It implements the recursive midpoint displacement that turns four
   random corner values into a full field of scalars.
2. Colour: It maps every scalar onto the RGB "plasma spectrum".
3. Output: It writes exactly one colour per pixel into a caller-owned buffer.

Note: This package should be pure Python/NumPy and should NOT import PySide6.
"""
from plasmafractal.core.canvas import CanvasSize, PixelBuffer, PixelWriter
from plasmafractal.core.color import RGB, scalar_to_color, scalar_to_color_array, to_rgb8
from plasmafractal.core.displacement import (
    AttenuatedDisplacer,
    Displacer,
    SizeScaledDisplacer,
)
from plasmafractal.core.renderer import GridCell, PlasmaRenderer, generate, render_image

__all__ = [
    "AttenuatedDisplacer",
    "CanvasSize",
    "Displacer",
    "GridCell",
    "PixelBuffer",
    "PixelWriter",
    "PlasmaRenderer",
    "RGB",
    "SizeScaledDisplacer",
    "generate",
    "render_image",
    "scalar_to_color",
    "scalar_to_color_array",
    "to_rgb8",
]
