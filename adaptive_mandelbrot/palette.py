"""Gradient palette generation and smooth escape-time color mapping."""

from __future__ import annotations

import math
from dataclasses import dataclass

import mpmath
import numpy as np

from .buffer import PixelBuffer
from .escape import EscapeOutcome
from .splines import MonotonicCubicSpline

# Default gradient of Ultra Fractal, see https://stackoverflow.com/a/25816111
GRADIENT_POSITIONS = (0.0, 0.15848670756646216, 0.42058623040218135, 0.6441717791411042, 0.8588957055214724, 1.0)
GRADIENT_RED = (0.0, 0.128364389, 0.917184265, 0.98757764, 0.004140787, 0.0)
GRADIENT_GREEN = (0.0, 0.424430642, 1.0, 0.677018634, 0.026915114, 0.039337474)
GRADIENT_BLUE = (0.399585921, 0.813664596, 1.0, 0.022774327, 0.014492754, 0.399585921)

CHANNEL_MAX = 255
INTERIOR_INDEX = -1

_LOG2 = math.log(2.0)
_EPS = 1e-12


def gradient_splines() -> tuple[MonotonicCubicSpline, MonotonicCubicSpline, MonotonicCubicSpline]:
    """Return the red, green and blue splines of the gradient, in 0..255 units."""

    return tuple(
        MonotonicCubicSpline(GRADIENT_POSITIONS, [v * CHANNEL_MAX for v in values])
        for values in (GRADIENT_RED, GRADIENT_GREEN, GRADIENT_BLUE)
    )


def generate_palette(size: int) -> np.ndarray:
    """Sample the gradient at ``size`` evenly spaced positions of ``[0, 1)``.

    Returns a ``(size, 3)`` array of ``uint8`` RGB triples.
    """

    if size < 1:
        raise ValueError(f"palette size must be positive, got {size}")

    positions = np.arange(size, dtype=np.float64) / size
    channels = [spline.sample(positions) for spline in gradient_splines()]
    rgb = np.stack(channels, axis=-1)
    return np.clip(np.rint(rgb), 0, CHANNEL_MAX).astype(np.uint8)


def smooth_color_index(outcome: EscapeOutcome, palette_length: int, scale: float = 1.0) -> int:
    """Map an escape outcome to a palette index using continuous escape time.

    Interior outcomes map to :data:`INTERIOR_INDEX`, which callers paint with
    a background color instead of looking it up.
    """

    if not outcome.escaped:
        return INTERIOR_INDEX

    log_norm = max(float(mpmath.ln(outcome.exit_norm)), _EPS)
    n_smooth = (outcome.iterations + 1) - math.log(log_norm) / _LOG2
    index = int(round(n_smooth * scale))
    return min(max(index, 0), palette_length - 1)


@dataclass(frozen=True, eq=False)
class ColorMapper:
    """Translate escape outcomes into displayable RGB colors."""

    palette: np.ndarray
    inside_color: tuple[int, int, int] = (0, 0, 0)
    scale: float = 1.0

    def index(self, outcome: EscapeOutcome) -> int:
        return smooth_color_index(outcome, len(self.palette), self.scale)

    def resolve(self, outcome: EscapeOutcome) -> tuple[int, int, int]:
        index = self.index(outcome)
        if index == INTERIOR_INDEX:
            return tuple(self.inside_color)
        return tuple(int(channel) for channel in self.palette[index])

    def colorize(self, buffer: PixelBuffer) -> np.ndarray:
        """Return the ``(height, width, 3)`` ``uint8`` image of a rendered buffer."""

        indices = np.empty(len(buffer), dtype=np.int64)
        for i, outcome in enumerate(buffer):
            if outcome is None:
                raise ValueError(f"pixel {i} of the buffer has not been rendered")
            indices[i] = self.index(outcome)

        inside = indices == INTERIOR_INDEX
        rgb = self.palette[np.where(inside, 0, indices)]
        rgb[inside] = np.asarray(self.inside_color, dtype=np.uint8)
        return rgb.reshape(buffer.height, buffer.width, 3)
