from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import numpy as np

from plasmafractal.core.color import RGB, to_rgb8_array

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class CanvasSize:
    """
    Immutable canvas dimensions for one generation pass.

    Raises:
        ValueError: If either dimension is not a positive integer.
    """
    width: int
    height: int

    def __post_init__(self) -> None:
        for name, value in (("width", self.width), ("height", self.height)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValueError(f"Canvas {name} must be an integer, got {value!r}.")
            if value <= 0:
                raise ValueError(f"Canvas {name} must be positive, got {value}.")

    @property
    def shape(self) -> tuple[int, int]:
        """Array shape in (rows, columns) order."""
        return self.height, self.width


class PixelWriter(Protocol):
    """Anything that accepts one colour per integer pixel coordinate."""
    def write_pixel(self, x: int, y: int, color: RGB) -> None: ...


class PixelBuffer:
    """
    NumPy backed RGB buffer, indexed as buffer[y, x].

    Channel values are stored unclamped so that out-of-range colours produced
    by extrapolated scalars stay visible; clamping happens in `to_rgb8`.
    """

    def __init__(self, canvas: CanvasSize) -> None:
        self.canvas = canvas
        self.pixels: npt.NDArray[np.float64] = np.zeros((*canvas.shape, 3), dtype=np.float64)
        self.write_count = 0

    def write_pixel(self, x: int, y: int, color: RGB) -> None:
        if not (0 <= x < self.canvas.width and 0 <= y < self.canvas.height):
            raise IndexError(
                f"Pixel ({x}, {y}) is outside the {self.canvas.width}x{self.canvas.height} canvas."
            )
        self.pixels[y, x] = color
        self.write_count += 1

    def to_rgb8(self) -> npt.NDArray[np.uint8]:
        """Quantised copy of the buffer, shape (H, W, 3)."""
        return to_rgb8_array(self.pixels)
