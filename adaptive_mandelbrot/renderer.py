"""Rendering entry points: parameters, geometry resolution and the render pass."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import numpy as np

from .buffer import PixelBuffer
from .errors import ConfigurationError
from .geometry import ImageGeometry, precision_context, required_precision
from .palette import generate_palette
from .partition import PartitionStats, render_exhaustive, render_partitioned

logger = logging.getLogger(__name__)

# Bits used to parse centre and scale before the render precision is known.
_PARSE_GUARD_BITS = 64


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single render of the Mandelbrot set.

    Centre and scale are decimal strings so deep-zoom coordinates keep every
    digit until they are parsed at the render precision. ``scale`` is half the
    width of the view; the half-height follows from the pixel aspect ratio.
    """

    x_res: int
    y_res: int
    x_center: str
    y_center: str
    scale: str
    max_iterations: int
    precision: int | None = None


def _parse_bits(*values: str) -> int:
    digits = max(len(str(value)) for value in values)
    return digits * 4 + _PARSE_GUARD_BITS


def compute_geometry(params: RenderParameters) -> ImageGeometry:
    """Resolve ``params`` into an :class:`ImageGeometry`.

    When ``params.precision`` is ``None`` the precision is derived from the
    pixel spacing so that adjacent pixels stay distinct.
    """

    if params.x_res < 1 or params.y_res < 1:
        raise ConfigurationError(f"image dimensions must be positive, got {params.x_res}x{params.y_res}")

    bits = _parse_bits(params.x_center, params.y_center, params.scale)
    if params.precision is not None:
        bits = max(bits, params.precision)
    ctx = precision_context(bits)

    try:
        x_center = ctx.mpf(params.x_center)
        y_center = ctx.mpf(params.y_center)
        scale = ctx.mpf(params.scale)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"invalid centre or scale: {exc}") from exc
    if not scale > 0:
        raise ConfigurationError("the scale parameter must be larger than zero")

    half_width = scale
    half_height = scale * params.y_res / params.x_res

    precision = params.precision
    if precision is None:
        spacing = min(2 * half_width / params.x_res, 2 * half_height / params.y_res)
        magnitude = max(abs(x_center), abs(y_center)) + max(half_width, half_height)
        precision = required_precision(magnitude, spacing)
        logger.debug("Derived precision of %d bits", precision)

    return ImageGeometry(
        width=params.x_res,
        height=params.y_res,
        upper_left=(x_center - half_width, y_center + half_height),
        lower_right=(x_center + half_width, y_center - half_height),
        precision=precision,
        max_iterations=params.max_iterations,
    )


@dataclass(frozen=True, eq=False)
class RenderResult:
    """Container for the results of a render."""

    geometry: ImageGeometry
    buffer: PixelBuffer
    palette: np.ndarray
    stats: PartitionStats


def render_frame(
    geometry: ImageGeometry,
    *,
    workers: int | None = None,
    exhaustive: bool = False,
) -> RenderResult:
    """Render ``geometry`` and build a palette with one entry per iteration."""

    started = time.perf_counter()
    if exhaustive:
        buffer, stats = render_exhaustive(geometry)
    else:
        buffer, stats = render_partitioned(geometry, workers=workers)
    elapsed = time.perf_counter() - started

    logger.info(
        "Rendered %dx%d at %d bits in %.2fs: %d evaluations, %d pixels filled, %d partitions",
        geometry.width,
        geometry.height,
        geometry.precision,
        elapsed,
        stats.evaluated,
        stats.filled,
        stats.partitions,
    )

    return RenderResult(
        geometry=geometry,
        buffer=buffer,
        palette=generate_palette(geometry.max_iterations),
        stats=stats,
    )
