"""Arbitrary-precision escape-time evaluation of z -> z**2 + c."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from .geometry import plane_point, precision_context

BAILOUT = 4


@dataclass(frozen=True)
class Interior:
    """The orbit stayed bounded for the whole iteration cap."""

    escaped = False


@dataclass(frozen=True)
class Exterior:
    """The orbit left the bail-out circle.

    ``iterations`` is the index of the first orbit point, counting ``z0 = 0``,
    whose squared magnitude exceeded the bail-out; ``exit_norm`` is that
    squared magnitude.
    """

    iterations: int
    exit_norm: Any

    escaped = True


EscapeOutcome = Union[Interior, Exterior]

INTERIOR = Interior()


def escape_time(c: Any, cap: int, precision: int) -> EscapeOutcome:
    """Iterate ``z -> z**2 + c`` for at most ``cap`` steps at ``precision`` bits.

    The orbit starts at ``z0 = 0``. The squared magnitude is tested before
    each squaring, so ``exit_norm`` belongs to the orbit point that failed the
    test. Points on the bail-out circle itself are not escaped.
    """

    ctx = precision_context(precision)
    c = plane_point(c, ctx)
    cx = c.real
    cy = c.imag
    bailout = ctx.mpf(BAILOUT)

    x = ctx.mpf(0)
    y = ctx.mpf(0)
    for i in range(cap):
        x2 = x * x
        y2 = y * y
        norm = x2 + y2
        if norm > bailout:
            return Exterior(i, norm)
        y = 2 * x * y + cy
        x = x2 - y2 + cx
    return INTERIOR
