"""Public API for adaptive, arbitrary-precision Mandelbrot rendering."""

from .buffer import BufferRegion, PixelBuffer
from .errors import ConfigurationError, RenderError, ResourceError
from .escape import INTERIOR, EscapeOutcome, Exterior, Interior, escape_time
from .forkjoin import ForkJoinPool
from .geometry import (
    MIN_PRECISION,
    ImageGeometry,
    Partition,
    pixel_to_point,
    precision_context,
    required_precision,
)
from .output import write_image
from .palette import INTERIOR_INDEX, ColorMapper, generate_palette, smooth_color_index
from .parsing import parse_complex, parse_pair
from .partition import PartitionStats, process_partition, render_exhaustive, render_partitioned
from .renderer import RenderParameters, RenderResult, compute_geometry, render_frame
from .splines import MonotonicCubicSpline

__all__ = [
    "BufferRegion",
    "ColorMapper",
    "ConfigurationError",
    "EscapeOutcome",
    "Exterior",
    "ForkJoinPool",
    "INTERIOR",
    "INTERIOR_INDEX",
    "ImageGeometry",
    "Interior",
    "MIN_PRECISION",
    "MonotonicCubicSpline",
    "Partition",
    "PartitionStats",
    "PixelBuffer",
    "RenderError",
    "RenderParameters",
    "RenderResult",
    "ResourceError",
    "compute_geometry",
    "escape_time",
    "generate_palette",
    "parse_complex",
    "parse_pair",
    "pixel_to_point",
    "precision_context",
    "process_partition",
    "render_exhaustive",
    "render_frame",
    "render_partitioned",
    "required_precision",
    "smooth_color_index",
    "write_image",
]
