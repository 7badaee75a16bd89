"""
Configuration & Defaults
========================
This module serves as the central registry for global constants and the
settings of one rendering run.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (canvas size, roughness) scattered
   throughout the GUI and the command line.
2. Construction: It turns user-facing settings into a ready `PlasmaRenderer`.

Exports:
    DEFAULT_WIDTH (int): Default canvas width in pixels.
    DEFAULT_HEIGHT (int): Default canvas height in pixels.
    RenderSettings: Dataclass bundling size, seed and displacement mode.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from plasmafractal.core.canvas import CanvasSize
from plasmafractal.core.displacement import AttenuatedDisplacer, Displacer, SizeScaledDisplacer
from plasmafractal.core.renderer import PlasmaRenderer

# Global Constants
DEFAULT_WIDTH: int = 512
DEFAULT_HEIGHT: int = 512
DEFAULT_ROUGHNESS: float = 3.0
DEFAULT_INITIAL_DISPLACEMENT: float = 0.75
DEFAULT_ATTENUATION: float = 0.5


class DisplacementMode(str, Enum):
    """How the midpoint displacement magnitude shrinks during subdivision."""
    SCALED = "scaled"
    ATTENUATED = "attenuated"


@dataclass
class RenderSettings:
    """
    Settings for one plasma rendering run.
    """
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    seed: Optional[int] = None
    mode: DisplacementMode = DisplacementMode.SCALED
    roughness: float = DEFAULT_ROUGHNESS
    initial_displacement: float = DEFAULT_INITIAL_DISPLACEMENT
    attenuation: float = DEFAULT_ATTENUATION

    def __post_init__(self) -> None:
        try:
            self.mode = DisplacementMode(self.mode)
        except ValueError:
            choices = ", ".join(m.value for m in DisplacementMode)
            raise ValueError(f"Unknown displacement mode '{self.mode}'. Choose one of: {choices}.") from None
        # Validates the dimensions early
        self.canvas()

    def canvas(self) -> CanvasSize:
        return CanvasSize(self.width, self.height)

    def make_displacer(self) -> Displacer:
        if self.mode is DisplacementMode.ATTENUATED:
            return AttenuatedDisplacer(self.initial_displacement, self.attenuation)
        return SizeScaledDisplacer(self.roughness)

    def make_renderer(self) -> PlasmaRenderer:
        return PlasmaRenderer(seed=self.seed, displacer=self.make_displacer())
