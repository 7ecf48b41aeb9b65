"""Error types raised by the rendering engine."""

from __future__ import annotations


class RenderError(Exception):
    """Base class for every error raised by :mod:`adaptive_mandelbrot`."""


class ConfigurationError(RenderError, ValueError):
    """Malformed geometry or options, rejected before rendering starts."""


class ResourceError(RenderError, RuntimeError):
    """The pixel buffer or the worker pool could not be allocated."""
