"""
Fractal Renderer
================
Recursive midpoint displacement over a rectangular canvas.

The canvas starts as one cell with four random corner values. Every cell larger
than the base size is split into four quadrants: edge midpoints are the plain
averages of adjacent corners, the centre is the corner average plus a random
displacement, clamped to [0, 1]. Cells at or below the base size are emitted as
pixels coloured by the average of their corners.

Corners are always ordered top-left, top-right, bottom-right, bottom-left.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Protocol

import numpy as np

from plasmafractal.core.canvas import CanvasSize, PixelBuffer, PixelWriter
from plasmafractal.core.color import scalar_to_color, scalar_to_color_array, to_rgb8_array
from plasmafractal.core.displacement import Displacer, SizeScaledDisplacer

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

Corners = tuple[float, float, float, float]


class RandomSource(Protocol):
    """Minimal interface the renderer needs from a random generator."""
    def random(self) -> float: ...


def clamp_unit(value: float) -> float:
    """Clamp a value to [0, 1]."""
    if value < 0.0:
        return 0.0
    if value > 1.0:
        return 1.0
    return value


@dataclass(frozen=True)
class GridCell:
    """
    One rectangle of the subdivision with its four corner scalars.
    """
    x: float
    y: float
    width: float
    height: float
    corners: Corners
    depth: int = 0

    def is_base(self, base_size: float) -> bool:
        return self.width <= base_size and self.height <= base_size

    def average(self) -> float:
        c1, c2, c3, c4 = self.corners
        return (c1 + c2 + c3 + c4) / 4

    def edges(self) -> Corners:
        """Midpoints of the top, right, bottom and left edges, never clamped."""
        c1, c2, c3, c4 = self.corners
        return (c1 + c2) / 2, (c2 + c3) / 2, (c3 + c4) / 2, (c4 + c1) / 2

    def split(self, middle: float) -> tuple[GridCell, GridCell, GridCell, GridCell]:
        """
        Four child quadrants sharing `middle` as their common corner.

        Returns:
            Children in top-left, top-right, bottom-right, bottom-left order.
        """
        c1, c2, c3, c4 = self.corners
        edge1, edge2, edge3, edge4 = self.edges()
        half_w = self.width / 2
        half_h = self.height / 2
        depth = self.depth + 1
        return (
            GridCell(self.x, self.y, half_w, half_h, (c1, edge1, middle, edge4), depth),
            GridCell(self.x + half_w, self.y, half_w, half_h, (edge1, c2, edge2, middle), depth),
            GridCell(self.x + half_w, self.y + half_h, half_w, half_h, (middle, edge2, c3, edge3), depth),
            GridCell(self.x, self.y + half_h, half_w, half_h, (edge4, middle, edge3, c4), depth),
        )

    def pixel_span(self) -> tuple[range, range]:
        """
        Integer pixel coordinates owned by this cell.

        A pixel p belongs to the cell when floor(x) <= p < floor(x + width), same for y.
        Neighbouring cells split the integers at their shared boundary, so every
        pixel of the canvas is owned by exactly one terminal cell and a cell with
        a non-empty span always includes its truncated origin.
        """
        xs = range(math.floor(self.x), math.floor(self.x + self.width))
        ys = range(math.floor(self.y), math.floor(self.y + self.height))
        return xs, ys


@dataclass
class RenderStats:
    """Summary of one generation pass."""
    width: int
    height: int
    cells: int = 0
    terminal_cells: int = 0
    max_depth: int = 0
    pixels: int = 0


class PlasmaRenderer:
    """
    Plasma generator owning its own random generator.

    Two renderers built with the same seed produce identical images for the
    same canvas size.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        displacer: Optional[Displacer] = None,
        base_size: float = 2.0,
        rng: Optional[RandomSource] = None,
    ) -> None:
        """
        Args:
            seed: Seed for numpy's default generator. Ignored when `rng` is given.
            displacer: Midpoint displacement strategy, size scaled by default.
            base_size: Cells no larger than this in both dimensions are not split.
            rng: Explicit random source, mainly for scripted values in tests.
        """
        if base_size <= 0:
            raise ValueError(f"Base cell size must be positive, got {base_size}.")
        self.rng: RandomSource = rng if rng is not None else np.random.default_rng(seed)
        self.displacer = displacer or SizeScaledDisplacer()
        self.base_size = base_size
        self.last_stats: Optional[RenderStats] = None

    def reseed(self, seed: Optional[int] = None) -> None:
        """Replace the random generator with a freshly seeded one."""
        self.rng = np.random.default_rng(seed)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------
    def _initial_cell(self, canvas: CanvasSize) -> GridCell:
        corners = (
            float(self.rng.random()),
            float(self.rng.random()),
            float(self.rng.random()),
            float(self.rng.random()),
        )
        return GridCell(0.0, 0.0, float(canvas.width), float(canvas.height), corners)

    def _subdivide(
        self,
        cell: GridCell,
        canvas: CanvasSize,
        emit: Callable[[GridCell], None],
        stats: RenderStats,
    ) -> None:
        stats.cells += 1
        if cell.is_base(self.base_size):
            stats.terminal_cells += 1
            stats.max_depth = max(stats.max_depth, cell.depth)
            emit(cell)
            return

        half_w = cell.width / 2
        half_h = cell.height / 2
        offset = self.displacer(half_w, half_h, cell.depth, canvas, self.rng)
        middle = clamp_unit(cell.average() + offset)

        for child in cell.split(middle):
            self._subdivide(child, canvas, emit, stats)

    def _run(self, canvas: CanvasSize, emit: Callable[[GridCell], None], stats: RenderStats) -> RenderStats:
        logger.debug(f"Generating {canvas.width}x{canvas.height} plasma with {self.displacer.NAME} displacement.")
        self._subdivide(self._initial_cell(canvas), canvas, emit, stats)
        self.last_stats = stats
        logger.debug(
            f"Plasma done: {stats.cells} cells, {stats.terminal_cells} terminal, "
            f"depth {stats.max_depth}, {stats.pixels} pixels."
        )
        return stats

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def generate(self, canvas_width: int, canvas_height: int, pixel_writer: PixelWriter) -> RenderStats:
        """
        Generate one plasma image into `pixel_writer`.

        `write_pixel` is called exactly once for every coordinate in
        [0, canvas_width) x [0, canvas_height).

        Raises:
            ValueError: If the canvas dimensions are not positive integers.
        """
        canvas = CanvasSize(canvas_width, canvas_height)
        stats = RenderStats(width=canvas.width, height=canvas.height)

        def emit(cell: GridCell) -> None:
            color = scalar_to_color(cell.average())
            xs, ys = cell.pixel_span()
            for py in ys:
                for px in xs:
                    pixel_writer.write_pixel(px, py, color)
                    stats.pixels += 1

        return self._run(canvas, emit, stats)

    def scalar_field(self, canvas_width: int, canvas_height: int) -> npt.NDArray[np.float64]:
        """
        Generate the plasma as a (H, W) array of scalars, before colour mapping.

        Consumes the random generator exactly like `generate`, so for the same
        seed `scalar_to_color_array(field)` matches the pixels `generate` writes.
        """
        canvas = CanvasSize(canvas_width, canvas_height)
        field = np.empty(canvas.shape, dtype=np.float64)
        stats = RenderStats(width=canvas.width, height=canvas.height)

        def emit(cell: GridCell) -> None:
            xs, ys = cell.pixel_span()
            if xs and ys:
                field[ys.start:ys.stop, xs.start:xs.stop] = cell.average()
                stats.pixels += len(xs) * len(ys)

        self._run(canvas, emit, stats)
        return field

    def render_image(self, canvas_width: int, canvas_height: int) -> npt.NDArray[np.uint8]:
        """
        Generate the plasma as an 8-bit RGB image of shape (H, W, 3).
        """
        field = self.scalar_field(canvas_width, canvas_height)
        return to_rgb8_array(scalar_to_color_array(field))


def generate(
    canvas_width: int,
    canvas_height: int,
    pixel_writer: PixelWriter,
    seed: Optional[int] = None,
) -> RenderStats:
    """Generate one plasma image with a freshly seeded renderer."""
    return PlasmaRenderer(seed=seed).generate(canvas_width, canvas_height, pixel_writer)


def render_image(
    canvas_width: int,
    canvas_height: int,
    seed: Optional[int] = None,
    displacer: Optional[Displacer] = None,
) -> npt.NDArray[np.uint8]:
    """
    Convenience wrapper returning an 8-bit RGB array.

    The image is drawn through a `PixelBuffer`, the same path a windowing
    collaborator would use.
    """
    renderer = PlasmaRenderer(seed=seed, displacer=displacer)
    buffer = PixelBuffer(CanvasSize(canvas_width, canvas_height))
    renderer.generate(canvas_width, canvas_height, buffer)
    return buffer.to_rgb8()
