"""Parsing of separator-delimited coordinate pairs such as ``800x600`` or ``-1.2,0.35``."""

from __future__ import annotations

from typing import Callable, TypeVar

import mpmath

T = TypeVar("T")


def parse_pair(text: str, separator: str, convert: Callable[[str], T] = float) -> tuple[T, T] | None:
    """Parse ``<left><separator><right>`` with ``convert`` applied to both sides.

    Returns ``None`` when the separator is missing or either side fails to
    convert.
    """

    left, found, right = text.partition(separator)
    if not found:
        return None
    try:
        return convert(left), convert(right)
    except (TypeError, ValueError):
        return None


def _decimal(text: str) -> str:
    value = text.strip()
    # Validate without rounding: the caller picks the working precision later.
    mpmath.mpf(value)
    return value


def parse_complex(text: str) -> tuple[str, str] | None:
    """Parse ``re,im`` into a pair of validated decimal strings."""

    return parse_pair(text, ",", _decimal)
