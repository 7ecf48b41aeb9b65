"""Adaptive recursive rendering over rectangular partitions of the image.

Each partition first evaluates its perimeter. The Mandelbrot set is
connected, so a perimeter made only of interior points is taken to enclose
interior points only and the rest of the rectangle is filled without further
evaluation. This is a heuristic: a thin exterior filament crossing the
rectangle without touching its edges is painted as interior. Otherwise the
rectangle is split into four quadrants that are processed as independent
fork-join tasks writing into disjoint parts of the shared buffer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .buffer import BufferRegion, PixelBuffer
from .errors import ConfigurationError
from .escape import INTERIOR, escape_time
from .forkjoin import ForkJoinPool
from .geometry import ImageGeometry, Partition, pixel_to_point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PartitionStats:
    """Work counters of a (sub)tree of partitions."""

    evaluated: int = 0
    filled: int = 0
    partitions: int = 0

    def __add__(self, other: "PartitionStats") -> "PartitionStats":
        return PartitionStats(
            evaluated=self.evaluated + other.evaluated,
            filled=self.filled + other.filled,
            partitions=self.partitions + other.partitions,
        )


def _evaluate_pixel(geometry: ImageGeometry, region: BufferRegion, x: int, y: int):
    point = pixel_to_point((x, y), geometry)
    outcome = escape_time(point, geometry.max_iterations, geometry.precision)
    region.write(x, y, outcome)
    return outcome


def _ensure_buffer(geometry: ImageGeometry, buffer: PixelBuffer | None) -> PixelBuffer:
    if buffer is None:
        return PixelBuffer(geometry.width, geometry.height)
    if (buffer.width, buffer.height) != (geometry.width, geometry.height):
        raise ConfigurationError(
            f"buffer is {buffer.width}x{buffer.height} but the image is {geometry.width}x{geometry.height}"
        )
    return buffer


def process_partition(
    geometry: ImageGeometry,
    partition: Partition,
    buffer: PixelBuffer,
    pool: ForkJoinPool | None = None,
    depth: int = 0,
) -> PartitionStats:
    """Render ``partition`` into ``buffer`` and return the work performed.

    With a ``pool`` the four quadrants of a split run as fork-join tasks and
    this call returns only after all of them have finished.
    """

    region = buffer.region(partition)

    evaluated = 0
    perimeter_in_set = True
    for x, y in partition.perimeter():
        outcome = _evaluate_pixel(geometry, region, x, y)
        evaluated += 1
        if outcome.escaped:
            perimeter_in_set = False

    stats = PartitionStats(evaluated=evaluated, partitions=1)

    if perimeter_in_set:
        filled = 0
        for x, y in partition.interior():
            region.write(x, y, INTERIOR)
            filled += 1
        return stats + PartitionStats(filled=filled)

    # A strip at most two pixels wide is all perimeter, already evaluated.
    if partition.width <= 2 or partition.height <= 2:
        return stats

    quadrants = partition.split()
    logger.debug("%03d: split %s into %s", depth, partition, quadrants)

    if pool is None:
        results = [process_partition(geometry, quadrant, buffer, None, depth + 1) for quadrant in quadrants]
    else:
        results = pool.invoke_all(
            [(process_partition, (geometry, quadrant, buffer, pool, depth + 1)) for quadrant in quadrants]
        )

    for child in results:
        stats = stats + child
    return stats


def render_partitioned(
    geometry: ImageGeometry,
    buffer: PixelBuffer | None = None,
    *,
    workers: int | None = None,
) -> tuple[PixelBuffer, PartitionStats]:
    """Render the whole image adaptively.

    ``workers=None`` uses one worker per CPU, ``workers=0`` renders on the
    calling thread only.
    """

    buffer = _ensure_buffer(geometry, buffer)
    root = geometry.root_partition()

    if workers == 0:
        return buffer, process_partition(geometry, root, buffer)

    with ForkJoinPool(workers) as pool:
        stats = process_partition(geometry, root, buffer, pool)
    return buffer, stats


def render_exhaustive(
    geometry: ImageGeometry,
    buffer: PixelBuffer | None = None,
) -> tuple[PixelBuffer, PartitionStats]:
    """Evaluate every pixel individually, without the perimeter shortcut."""

    buffer = _ensure_buffer(geometry, buffer)
    root = geometry.root_partition()
    region = buffer.region(root)
    for x, y in root.pixels():
        _evaluate_pixel(geometry, region, x, y)
    return buffer, PartitionStats(evaluated=root.area, partitions=1)
