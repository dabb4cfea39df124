"""
Dense bit array over [0, n_bits).

Responsibility: bit storage only. No prime logic.

Bit i lives in bit (i % 8) of byte (i // 8). Storage starts all zero and
comes from a BoundedArena when one is given, otherwise from the heap.
"""

import numpy as np
from numba import njit
from typing import Iterator, Optional

from .arena import BoundedArena

# Scratch size for chunked emission; bounds heap use independently of n_bits
CHUNK_BITS = 1 << 14


@njit
def _set_strided(buf: np.ndarray, start: int, step: int, n_bits: int) -> None:
    """Set bits start, start+step, ... below n_bits."""
    for j in range(start, n_bits, step):
        buf[j >> 3] |= np.uint8(1 << (j & 7))


@njit
def _count_zeros(buf: np.ndarray, start: int, stop: int) -> int:
    """Number of 0 bits in [start, stop)."""
    count = 0
    for i in range(start, stop):
        if ((buf[i >> 3] >> (i & 7)) & 1) == 0:
            count += 1
    return count


@njit
def _fill_zeros(buf: np.ndarray, start: int, stop: int, out: np.ndarray) -> int:
    """Write indices of 0 bits in [start, stop) into out; return how many."""
    k = 0
    for i in range(start, stop):
        if ((buf[i >> 3] >> (i & 7)) & 1) == 0:
            out[k] = i
            k += 1
    return k


class DynamicBitset:
    """
    Fixed-size bitset with test/set access.

    Parameters
    ----------
    n_bits : int
        Number of bits. Storage is ceil(n_bits / 8) bytes.
    arena : BoundedArena, optional
        Arena to draw storage from. Allocation failure propagates as
        ArenaExhaustedError.
    """

    def __init__(self, n_bits: int, arena: Optional[BoundedArena] = None):
        if n_bits < 0:
            raise ValueError(f"n_bits must be non-negative, got {n_bits}")
        self._n_bits = n_bits
        self._arena = arena
        nbytes = (n_bits + 7) // 8
        if arena is None:
            self._bytes = np.zeros(nbytes, dtype=np.uint8)
        else:
            self._bytes = arena.allocate(nbytes)

    def size(self) -> int:
        return self._n_bits

    def __len__(self) -> int:
        return self._n_bits

    @property
    def nbytes(self) -> int:
        return self._bytes.size

    def _check(self, i: int) -> None:
        if not 0 <= i < self._n_bits:
            raise IndexError(f"bit index {i} out of range [0, {self._n_bits})")

    def test(self, i: int) -> bool:
        self._check(i)
        return bool((self._bytes[i >> 3] >> (i & 7)) & 1)

    def set(self, i: int) -> None:
        self._check(i)
        self._bytes[i >> 3] |= np.uint8(1 << (i & 7))

    def set_multiples(self, start: int, step: int) -> None:
        """
        Set every bit start, start+step, ... below size().

        Same effect as calling set() on each index, in one compiled pass.
        """
        if step <= 0:
            raise ValueError(f"step must be positive, got {step}")
        if start < 0:
            raise IndexError(f"bit index {start} out of range [0, {self._n_bits})")
        if start < self._n_bits:
            _set_strided(self._bytes, start, step, self._n_bits)

    def count(self) -> int:
        """Number of set bits."""
        return self._n_bits - _count_zeros(self._bytes, 0, self._n_bits)

    def count_zeros(self, start: int = 0) -> int:
        """Number of 0 bits at indices >= start."""
        return _count_zeros(self._bytes, max(start, 0), self._n_bits)

    def fill_zero_indices(self, out: np.ndarray, start: int = 0) -> int:
        """
        Write the ascending indices >= start whose bit is 0 into `out`.

        `out` must have room for count_zeros(start) values; no temporary
        array is built.

        Returns
        -------
        int
            Number of indices written.
        """
        needed = self.count_zeros(start)
        if out.size < needed:
            raise ValueError(f"out holds {out.size} values, need {needed}")
        return _fill_zeros(self._bytes, max(start, 0), self._n_bits, out)

    def zero_indices(self, start: int = 0) -> np.ndarray:
        """
        Ascending indices >= start whose bit is 0.

        Returns
        -------
        np.ndarray
            int64 array of indices in [start, size()).
        """
        out = np.empty(self.count_zeros(start), dtype=np.int64)
        self.fill_zero_indices(out, start)
        return out

    def iter_zero_indices(self, start: int = 0,
                          chunk_bits: int = CHUNK_BITS) -> Iterator[np.ndarray]:
        """
        Yield the indices >= start whose bit is 0, one bounded chunk at a time.

        Each yielded array is a view into one scratch buffer of `chunk_bits`
        entries and is overwritten by the next chunk.
        """
        scratch = np.empty(chunk_bits, dtype=np.int64)
        for lo in range(max(start, 0), self._n_bits, chunk_bits):
            hi = min(lo + chunk_bits, self._n_bits)
            k = _fill_zeros(self._bytes, lo, hi, scratch)
            if k:
                yield scratch[:k]

    def release(self) -> None:
        """Hand storage back to the arena. The bitset is unusable afterwards."""
        if self._bytes is None:
            return
        if self._arena is not None:
            self._arena.release(self._bytes)
        self._bytes = None

    def __enter__(self) -> 'DynamicBitset':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        if self._bytes is None:
            return f"DynamicBitset(n_bits={self._n_bits:,}, released)"
        return f"DynamicBitset(n_bits={self._n_bits:,}, set={self.count():,})"
