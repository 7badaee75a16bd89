from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import numpy as np

    from plasmafractal.core.canvas import CanvasSize


def displacement(
    magnitude_basis: float,
    canvas_width: int,
    canvas_height: int,
    rng: np.random.Generator,
    roughness: float = 3.0,
) -> float:
    """
    Random perturbation for a subdivided cell's midpoint.

    Args:
        magnitude_basis: Half-width plus half-height of the cell being split.
        canvas_width: Width of the whole canvas in pixels.
        canvas_height: Height of the whole canvas in pixels.
        rng: Random source, one draw is consumed.
        roughness: Multiplier applied to the size ratio.

    Returns:
        A uniform sample from (-scale/2, scale/2), where
        scale = magnitude_basis / (canvas_width + canvas_height) * roughness.
    """
    scale = magnitude_basis / (canvas_width + canvas_height) * roughness
    return (rng.random() - 0.5) * scale


# ==========================================
# DISPLACEMENT STRATEGIES
# ==========================================
class Displacer(ABC):
    """
    Abstract base class for midpoint displacement strategies.
    """
    NAME: str = "Displacer"

    @abstractmethod
    def __call__(
        self,
        half_width: float,
        half_height: float,
        depth: int,
        canvas: CanvasSize,
        rng: np.random.Generator,
    ) -> float:
        """
        Get the displacement for one midpoint.

        Args:
            half_width: Width of the child cells.
            half_height: Height of the child cells.
            depth: Recursion depth of the cell being split, 0 for the whole canvas.
            canvas: Dimensions of the whole canvas.
            rng: Random source.

        Returns:
            Value added to the averaged corners before clamping.
        """
        pass


class SizeScaledDisplacer(Displacer):
    """
    Displacement proportional to cell size relative to the canvas.
    """
    NAME = "Size scaled"

    def __init__(self, roughness: float = 3.0) -> None:
        self.roughness = roughness

    def __call__(
        self,
        half_width: float,
        half_height: float,
        depth: int,
        canvas: CanvasSize,
        rng: np.random.Generator,
    ) -> float:
        return displacement(
            half_width + half_height, canvas.width, canvas.height, rng, roughness=self.roughness
        )


class AttenuatedDisplacer(Displacer):
    """
    Displacement bounded by a maximum that shrinks geometrically with depth.

    At depth d the sample is uniform in [-m, m) with m = initial_max * attenuation**d.
    """
    NAME = "Attenuated"

    def __init__(self, initial_max: float = 0.75, attenuation: float = 0.5) -> None:
        self.initial_max = initial_max
        self.attenuation = attenuation

    def max_at(self, depth: int) -> float:
        return self.initial_max * self.attenuation ** depth

    def __call__(
        self,
        half_width: float,
        half_height: float,
        depth: int,
        canvas: CanvasSize,
        rng: np.random.Generator,
    ) -> float:
        return 2 * self.max_at(depth) * (rng.random() - 0.5)
