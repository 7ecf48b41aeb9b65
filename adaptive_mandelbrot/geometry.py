"""Image geometry, pixel partitions and the pixel-to-plane mapping.

All complex-plane values of a render live in one mpmath context whose
precision is the geometry's ``precision`` (in bits). Nothing here touches
the global ``mpmath.mp`` context.

At extreme zoom depths a precision that is too small makes neighbouring
pixels map to the same complex point. This is not detected; use
:func:`required_precision` to pick a sufficient value.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterator

import mpmath

from .errors import ConfigurationError

MIN_PRECISION = 20
GUARD_BITS = 16


@lru_cache(maxsize=None)
def precision_context(bits: int) -> mpmath.MPContext:
    """Return a shared mpmath context working at ``bits`` of precision."""

    ctx = mpmath.MPContext()
    ctx.prec = int(bits)
    return ctx


def plane_point(value: Any, ctx: mpmath.MPContext):
    """Coerce ``value`` to an ``mpc`` whose parts are rounded to ``ctx.prec``.

    ``value`` may be a Python number, an mpmath number or an ``(re, im)``
    pair of numbers or decimal strings.
    """

    if isinstance(value, (tuple, list)):
        re, im = value
    elif isinstance(value, str):
        re, im = value, 0
    else:
        re = getattr(value, "real", value)
        im = getattr(value, "imag", 0)
    return ctx.mpc(ctx.mpf(re), ctx.mpf(im))


def required_precision(center_magnitude: Any, pixel_spacing: Any) -> int:
    """Bits needed so that adjacent pixels stay distinct around the centre."""

    ctx = precision_context(64)
    spacing = abs(ctx.mpf(pixel_spacing))
    if spacing == 0:
        raise ConfigurationError("pixel spacing must be non-zero")
    magnitude = max(abs(ctx.mpf(center_magnitude)), ctx.mpf(1))
    bits = int(ctx.ceil(ctx.log(magnitude / spacing, 2))) + GUARD_BITS
    return max(MIN_PRECISION, bits)


@dataclass(frozen=True)
class Partition:
    """A rectangle of the pixel grid, in pixel units."""

    x_offset: int
    y_offset: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(f"empty partition: {self}")

    @classmethod
    def from_bounds(cls, min_x: int, min_y: int, max_x: int, max_y: int) -> "Partition":
        """Build a partition from inclusive pixel bounds."""
        return cls(min_x, min_y, max_x - min_x + 1, max_y - min_y + 1)

    @property
    def min_x(self) -> int:
        return self.x_offset

    @property
    def max_x(self) -> int:
        return self.x_offset + self.width - 1

    @property
    def min_y(self) -> int:
        return self.y_offset

    @property
    def max_y(self) -> int:
        return self.y_offset + self.height - 1

    @property
    def area(self) -> int:
        return self.width * self.height

    def contains(self, x: int, y: int) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def pixels(self) -> Iterator[tuple[int, int]]:
        for y in range(self.min_y, self.max_y + 1):
            for x in range(self.min_x, self.max_x + 1):
                yield x, y

    def perimeter(self) -> Iterator[tuple[int, int]]:
        """Yield every edge pixel exactly once, corners included."""

        for x in range(self.min_x, self.max_x + 1):
            yield x, self.min_y
        if self.height > 1:
            for x in range(self.min_x, self.max_x + 1):
                yield x, self.max_y
        for y in range(self.min_y + 1, self.max_y):
            yield self.min_x, y
            if self.width > 1:
                yield self.max_x, y

    def interior(self) -> Iterator[tuple[int, int]]:
        for y in range(self.min_y + 1, self.max_y):
            for x in range(self.min_x + 1, self.max_x):
                yield x, y

    def split(self) -> tuple["Partition", "Partition", "Partition", "Partition"]:
        """Split into the upper-left, upper-right, lower-left and lower-right quadrants.

        The split point is rounded toward the far edge. Every quadrant is
        non-empty and the four are pixel-disjoint as long as both dimensions
        exceed two pixels.
        """

        if self.width <= 2 or self.height <= 2:
            raise ValueError(f"cannot split a partition narrower than three pixels: {self}")

        x_mid, x_mid2 = _midpoints(self.min_x, self.max_x)
        y_mid, y_mid2 = _midpoints(self.min_y, self.max_y)
        return (
            Partition.from_bounds(self.min_x, self.min_y, x_mid, y_mid),
            Partition.from_bounds(x_mid2, self.min_y, self.max_x, y_mid),
            Partition.from_bounds(self.min_x, y_mid2, x_mid, self.max_y),
            Partition.from_bounds(x_mid2, y_mid2, self.max_x, self.max_y),
        )


def _midpoints(low: int, high: int) -> tuple[int, int]:
    span = high - low
    mid = min(max(low + span // 2 + span % 2, low), high)
    return mid, min(mid + 1, high)


@dataclass(frozen=True)
class ImageGeometry:
    """Pixel dimensions, complex-plane corners, precision and iteration cap of a render.

    The imaginary axis increases upward while pixel rows increase downward,
    so ``upper_left.imag`` must be greater than ``lower_right.imag``.
    """

    width: int
    height: int
    upper_left: Any
    lower_right: Any
    precision: int = 53
    max_iterations: int = 255

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ConfigurationError(f"image dimensions must be positive, got {self.width}x{self.height}")
        if self.precision < MIN_PRECISION:
            raise ConfigurationError(f"precision must be at least {MIN_PRECISION} bits, got {self.precision}")
        if self.max_iterations < 1:
            raise ConfigurationError(f"iteration cap must be at least 1, got {self.max_iterations}")

        ctx = self.context
        try:
            upper_left = plane_point(self.upper_left, ctx)
            lower_right = plane_point(self.lower_right, ctx)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"invalid plane corner: {exc}") from exc
        if not upper_left.real < lower_right.real:
            raise ConfigurationError("upper-left real part must be smaller than lower-right real part")
        if not upper_left.imag > lower_right.imag:
            raise ConfigurationError("upper-left imaginary part must be greater than lower-right imaginary part")

        object.__setattr__(self, "upper_left", upper_left)
        object.__setattr__(self, "lower_right", lower_right)

    @property
    def context(self) -> mpmath.MPContext:
        return precision_context(self.precision)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def root_partition(self) -> Partition:
        return Partition(0, 0, self.width, self.height)


def pixel_to_point(pixel: tuple[int, int], geometry: ImageGeometry):
    """Return the complex-plane point of the upper-left corner of ``pixel``."""

    x, y = pixel
    ctx = geometry.context
    upper_left = geometry.upper_left
    lower_right = geometry.lower_right

    plane_width = lower_right.real - upper_left.real
    plane_height = upper_left.imag - lower_right.imag

    # Rows grow downward, the imaginary axis upward.
    return ctx.mpc(
        upper_left.real + ctx.mpf(x) * plane_width / geometry.width,
        upper_left.imag - ctx.mpf(y) * plane_height / geometry.height,
    )
