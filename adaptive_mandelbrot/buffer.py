"""Shared pixel buffer written concurrently by disjoint partitions."""

from __future__ import annotations

from typing import Iterator

from .errors import ResourceError
from .escape import EscapeOutcome
from .geometry import Partition


class PixelBuffer:
    """Row-major storage of one optional escape outcome per pixel.

    ``None`` marks a pixel that has not been computed yet. During a render
    each partition task writes through its own :class:`BufferRegion`; sibling
    partitions never overlap, so writes need no locking.
    """

    def __init__(self, width: int, height: int) -> None:
        if width < 1 or height < 1:
            raise ValueError(f"buffer dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        try:
            self._cells: list[EscapeOutcome | None] = [None] * (width * height)
        except MemoryError as exc:
            raise ResourceError(f"cannot allocate a {width}x{height} pixel buffer") from exc

    def __len__(self) -> int:
        return len(self._cells)

    def __getitem__(self, index: int) -> EscapeOutcome | None:
        return self._cells[index]

    def __iter__(self) -> Iterator[EscapeOutcome | None]:
        return iter(self._cells)

    def index(self, x: int, y: int) -> int:
        return y * self.width + x

    def get(self, x: int, y: int) -> EscapeOutcome | None:
        return self._cells[self.index(x, y)]

    def is_complete(self) -> bool:
        return all(cell is not None for cell in self._cells)

    def snapshot(self) -> list[EscapeOutcome | None]:
        return list(self._cells)

    def region(self, partition: Partition) -> "BufferRegion":
        if partition.max_x >= self.width or partition.max_y >= self.height:
            raise IndexError(f"{partition} does not fit a {self.width}x{self.height} buffer")
        return BufferRegion(self, partition)

    def _store(self, index: int, outcome: EscapeOutcome) -> None:
        self._cells[index] = outcome


class BufferRegion:
    """Write access to the pixels of a single partition."""

    def __init__(self, buffer: PixelBuffer, partition: Partition) -> None:
        self.buffer = buffer
        self.partition = partition

    def write(self, x: int, y: int, outcome: EscapeOutcome) -> None:
        if not self.partition.contains(x, y):
            raise IndexError(f"pixel ({x}, {y}) lies outside {self.partition}")
        self.buffer._store(self.buffer.index(x, y), outcome)
