"""
Bounded arena allocator.

Responsibility: hand out zeroed byte blocks from one fixed-capacity region.
Keeps large sieve storage inside a known memory envelope instead of the
general heap.

Blocks are carved from the top of the arena and returned in LIFO order,
which is the only order a single sieve (or nested sieves) ever needs.
"""

from contextlib import contextmanager
from typing import Iterator, List

import numpy as np


class ArenaExhaustedError(MemoryError):
    """Raised when a request does not fit in the remaining arena capacity."""

    def __init__(self, requested: int, available: int, capacity: int):
        self.requested = requested
        self.available = available
        self.capacity = capacity
        super().__init__(
            f"arena exhausted: requested {requested:,} bytes, "
            f"{available:,} of {capacity:,} available"
        )


class BoundedArena:
    """
    Fixed-capacity byte arena.

    Parameters
    ----------
    capacity : int
        Size of the region in bytes. Allocated once, up front.
    """

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self._buffer = np.zeros(capacity, dtype=np.uint8)
        self._top = 0
        # (offset, size) of live blocks, oldest first
        self._blocks: List[tuple] = []

    @property
    def capacity(self) -> int:
        return self._buffer.size

    @property
    def used(self) -> int:
        return self._top

    @property
    def available(self) -> int:
        return self.capacity - self._top

    def allocate(self, nbytes: int) -> np.ndarray:
        """
        Carve a zeroed block of `nbytes` bytes.

        Returns
        -------
        np.ndarray
            uint8 view into the arena buffer.

        Raises
        ------
        ArenaExhaustedError
            If fewer than `nbytes` bytes remain. The arena is left unchanged.
        """
        if nbytes < 0:
            raise ValueError(f"nbytes must be non-negative, got {nbytes}")
        if nbytes > self.available:
            raise ArenaExhaustedError(nbytes, self.available, self.capacity)

        start = self._top
        block = self._buffer[start:start + nbytes]
        # Released blocks may leave stale bits behind
        block[:] = 0
        self._top += nbytes
        self._blocks.append((start, nbytes))
        return block

    def release(self, block: np.ndarray) -> None:
        """Return the most recently allocated block to the arena."""
        if not self._blocks:
            raise ValueError("release() on an arena with no live blocks")

        start, nbytes = self._blocks[-1]
        if block.size != nbytes or (
                nbytes and block.ctypes.data != self._buffer.ctypes.data + start):
            raise ValueError("blocks must be released in LIFO order")

        self._blocks.pop()
        self._top = start

    @contextmanager
    def lease(self, nbytes: int) -> Iterator[np.ndarray]:
        """Allocate a block for the duration of a `with` statement."""
        block = self.allocate(nbytes)
        try:
            yield block
        finally:
            self.release(block)

    def reset(self) -> None:
        """Drop every live block."""
        self._blocks.clear()
        self._top = 0

    def __repr__(self) -> str:
        return (f"BoundedArena(capacity={self.capacity:,}, used={self.used:,}, "
                f"blocks={len(self._blocks)})")

