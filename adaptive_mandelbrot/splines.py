"""Monotone piecewise-cubic Hermite interpolation (Fritsch-Carlson)."""

from __future__ import annotations

import math
from bisect import bisect_right
from typing import Iterable, Sequence

import numpy as np

MONOTONICITY_THRESHOLD = 3.0


class MonotonicCubicSpline:
    """Shape-preserving cubic spline through ``(x[i], y[i])``.

    Tangents start as the mean of the adjacent secants, except at local
    extrema of the data where they start flat instead of taking the plain
    mean. They are then limited interval by interval so the curve never
    overshoots its control points.
    """

    def __init__(self, x: Sequence[float], y: Sequence[float]) -> None:
        if len(x) != len(y):
            raise ValueError(f"got {len(x)} knots but {len(y)} values")
        if len(x) < 2:
            raise ValueError("a spline needs at least two control points")

        xs = tuple(float(v) for v in x)
        ys = tuple(float(v) for v in y)
        n = len(xs)

        secants = []
        for i in range(n - 1):
            h = xs[i + 1] - xs[i]
            if not h > 0.0:
                raise ValueError("control point x values must be strictly increasing")
            secants.append((ys[i + 1] - ys[i]) / h)

        tangents = [0.0] * n
        tangents[0] = secants[0]
        for i in range(1, n - 1):
            # Local extrema get a flat tangent.
            if secants[i - 1] * secants[i] <= 0.0:
                continue
            tangents[i] = (secants[i - 1] + secants[i]) * 0.5
        tangents[n - 1] = secants[n - 2]

        for i, secant in enumerate(secants):
            if secant == 0.0:
                tangents[i] = 0.0
                tangents[i + 1] = 0.0
                continue
            alpha = tangents[i] / secant
            beta = tangents[i + 1] / secant
            h = math.hypot(alpha, beta)
            if h > MONOTONICITY_THRESHOLD:
                t = MONOTONICITY_THRESHOLD / h
                tangents[i] = t * alpha * secant
                tangents[i + 1] = t * beta * secant

        self._x = xs
        self._y = ys
        self._m = tuple(tangents)

    @property
    def knots(self) -> tuple[float, ...]:
        return self._x

    @property
    def values(self) -> tuple[float, ...]:
        return self._y

    @property
    def tangents(self) -> tuple[float, ...]:
        return self._m

    @staticmethod
    def hermite(
        point: float,
        x: tuple[float, float],
        y: tuple[float, float],
        m: tuple[float, float],
    ) -> float:
        """Evaluate the cubic Hermite segment defined by its endpoints and tangents."""

        h = x[1] - x[0]
        t = (point - x[0]) / h
        return (y[0] * (1.0 + 2.0 * t) + h * m[0] * t) * (1.0 - t) * (1.0 - t) + (
            y[1] * (3.0 - 2.0 * t) + h * m[1] * (t - 1.0)
        ) * t * t

    def interpolate(self, point: float) -> float:
        xs, ys = self._x, self._y
        if point <= xs[0]:
            return ys[0]
        if point >= xs[-1]:
            return ys[-1]

        i = bisect_right(xs, point) - 1
        if point == xs[i]:
            return ys[i]
        return self.hermite(
            point,
            (xs[i], xs[i + 1]),
            (ys[i], ys[i + 1]),
            (self._m[i], self._m[i + 1]),
        )

    __call__ = interpolate

    def sample(self, points: Iterable[float]) -> np.ndarray:
        return np.array([self.interpolate(float(p)) for p in points], dtype=np.float64)
