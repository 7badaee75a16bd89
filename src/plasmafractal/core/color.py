from __future__ import annotations

import math
from typing import TYPE_CHECKING, NamedTuple

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


class RGB(NamedTuple):
    """Colour with float channels, nominally in [0, 1]."""
    red: float
    green: float
    blue: float


def scalar_to_color(c: float) -> RGB:
    """
    Map a plasma scalar onto a colour using three phase-shifted triangle waves.

    The input is not bounds-checked. Values outside [0, 1] extrapolate along the
    outermost segment, so the returned channels may fall outside [0, 1] as well.

    Args:
        c: Position along the plasma spectrum.

    Returns:
        The unclamped RGB colour.
    """
    if c < 0.5:
        red = c * 2
    else:
        red = (1.0 - c) * 2

    if c < 0.3:
        green = (0.3 - c) * 2
    elif c < 0.8:
        green = (c - 0.3) * 2
    else:
        green = (1.3 - c) * 2

    if c < 0.5:
        blue = (0.5 - c) * 2
    else:
        blue = (c - 0.5) * 2

    return RGB(red, green, blue)


def scalar_to_color_array(values: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """
    Vectorised `scalar_to_color`.

    Args:
        values: Array of scalars of any shape.

    Returns:
        Array with an extra trailing axis of length 3 holding (R, G, B).
    """
    c = np.asarray(values, dtype=np.float64)
    red = np.where(c < 0.5, c * 2, (1.0 - c) * 2)
    green = np.where(c < 0.3, (0.3 - c) * 2, np.where(c < 0.8, (c - 0.3) * 2, (1.3 - c) * 2))
    blue = np.where(c < 0.5, (0.5 - c) * 2, (c - 0.5) * 2)
    return np.stack([red, green, blue], axis=-1)


def _quantize(value: float) -> int:
    return min(max(math.floor(256 * value), 0), 255)


def to_rgb8(color: RGB) -> tuple[int, int, int]:
    """Quantise a float colour to 8 bits per channel, clamping to [0, 255]."""
    return _quantize(color.red), _quantize(color.green), _quantize(color.blue)


def to_rgb8_array(colors: npt.NDArray[np.float64]) -> npt.NDArray[np.uint8]:
    """Array form of `to_rgb8`."""
    return np.clip(np.floor(256 * colors), 0, 255).astype(np.uint8)


def plot_color_curves(samples: int = 500) -> None:
    """
    Plot the three channel curves over [0, 1] with a spectrum strip underneath.
    """
    import matplotlib.pyplot as plt

    c = np.linspace(0.0, 1.0, samples)
    colors = scalar_to_color_array(c)

    plt.rcParams["figure.constrained_layout.use"] = True
    fig, (ax, strip) = plt.subplots(
        2, 1, figsize=(7, 5), sharex=True, gridspec_kw={"height_ratios": [4, 1]}
    )

    ax.plot(c, colors[:, 0], 'r', lw=2, label="Red")
    ax.plot(c, colors[:, 1], 'g', lw=2, label="Green")
    ax.plot(c, colors[:, 2], 'b', lw=2, label="Blue")

    ax.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)
    ax.minorticks_on()
    ax.grid(visible=True, which='minor', axis='both', linestyle=':', color='gray', lw=0.5)
    ax.set_title("Plasma Colour Curves")
    ax.set_ylabel("Channel intensity")
    ax.legend()

    strip.imshow(np.clip(colors, 0.0, 1.0)[np.newaxis, :, :], aspect="auto", extent=(0, 1, 0, 1))
    strip.set_yticks([])
    strip.set_xlabel("Scalar value")

    plt.xlim(0, 1)
    plt.show()
