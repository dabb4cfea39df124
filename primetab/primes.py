"""
Prime generation utilities.

Responsibility: prime generation only. No li(x), no statistics.

The sieve uses inverted marking: a 1 bit means "composite (or masked)",
a 0 bit means "not excluded". Fresh storage is all zero, so the sieve
never has to initialise its N bits.
"""

from math import isqrt
from typing import Optional

import numpy as np

from .arena import BoundedArena
from .bitset import DynamicBitset


def index_dtype(N: int) -> np.dtype:
    """Smallest unsigned integer dtype that can hold N-1."""
    return np.min_scalar_type(max(N - 1, 0))


def _mark_composites(sieve: DynamicBitset) -> None:
    """Set the bit of every composite below sieve.size()."""
    N = sieve.size()
    # Primes p with p*p >= N have no unmarked multiple below N
    for i in range(2, isqrt(N - 1) + 1):
        if not sieve.test(i):
            sieve.set_multiples(i * i, i)


def sieve_primes(N: int, out, arena: Optional[BoundedArena] = None) -> int:
    """
    Write every prime p with 2 <= p < N into `out`, in ascending order.

    Parameters
    ----------
    N : int
        Exclusive upper bound. N <= 2 writes nothing.
    out : sink
        Either an object with an `append` method (list, deque, array.array),
        or a preallocated 1-D integer numpy array filled from index 0.
    arena : BoundedArena, optional
        Arena backing the sieve's bit array. Defaults to the heap.

    Returns
    -------
    int
        Number of values written, i.e. pi(N-1).

    Raises
    ------
    ArenaExhaustedError
        If the arena cannot hold ceil(N/8) bytes. Nothing is written to `out`.
    ValueError
        If a numpy `out` is too short or its dtype cannot hold N-1.
        Nothing is written to `out`.
    """
    to_array = isinstance(out, np.ndarray)
    if to_array:
        if out.ndim != 1 or out.dtype.kind not in 'ui':
            raise ValueError(f"out must be a 1-D integer array, got {out.dtype} "
                             f"with shape {out.shape}")
        if N > 1 and np.iinfo(out.dtype).max < N - 1:
            raise ValueError(f"dtype {out.dtype} cannot hold {N - 1}")

    if N <= 2:
        return 0

    with DynamicBitset(N, arena) as sieve:
        _mark_composites(sieve)

        # Emission writes straight from the bits; bits 0 and 1 are never read
        if to_array:
            return sieve.fill_zero_indices(out, 2)

        count = 0
        for chunk in sieve.iter_zero_indices(2):
            for p in chunk:
                out.append(int(p))
            count += chunk.size
        return count


def prime_flags_below(N: int, arena: Optional[BoundedArena] = None) -> np.ndarray:
    """
    Return boolean array where flags[i] is True iff i is prime.

    Parameters
    ----------
    N : int
        Upper bound (exclusive).

    Returns
    -------
    np.ndarray
        Boolean array of length max(N, 0).
    """
    flags = np.zeros(max(N, 0), dtype=bool)
    flags[primes_below(N, arena)] = True
    return flags


def primes_below(N: int, arena: Optional[BoundedArena] = None) -> np.ndarray:
    """
    Return array of all primes < N.

    The dtype is the smallest unsigned type able to hold N-1.
    """
    if N <= 2:
        return np.zeros(0, dtype=index_dtype(N))

    with DynamicBitset(N, arena) as sieve:
        _mark_composites(sieve)
        primes = np.empty(sieve.count_zeros(2), dtype=index_dtype(N))
        sieve.fill_zero_indices(primes, 2)
        return primes


def prime_count(N: int, arena: Optional[BoundedArena] = None) -> int:
    """pi(N-1): the number of primes below N."""
    if N <= 2:
        return 0

    with DynamicBitset(N, arena) as sieve:
        _mark_composites(sieve)
        return sieve.count_zeros(2)
