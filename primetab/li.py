"""
Logarithmic integral approximations.

Responsibility: li(x) estimates only. No prime generation.

li_asym evaluates the asymptotic expansion

    li(x) ~ (x / ln x) * sum_{k>=0} k! / (ln x)^k

which diverges for every x. Partial sums are best when cut at the
smallest term, so the expansion stops as soon as a term exceeds the
smallest one seen (after the first few terms have settled). Accuracy
improves with x and is poor below about e^2.
"""

import numpy as np
from scipy.special import expi
from typing import Tuple

# Safety bound on the number of terms, not an accuracy target
MAX_TERMS = 64

# Terms 1..SETTLE_TERMS are always added
SETTLE_TERMS = 3


def _expand(x, dtype) -> Tuple[np.floating, np.floating, int]:
    """
    Sum the truncated series in `dtype` arithmetic.

    Returns
    -------
    (sum, log_x, n_terms)
        n_terms counts the k=0 term.
    """
    dtype = np.dtype(dtype)
    if dtype.kind != 'f':
        raise ValueError(f"dtype must be a floating type, got {dtype}")

    one = dtype.type(1)
    x = dtype.type(x)
    if not np.isfinite(x) or x <= one:
        raise ValueError(f"li_asym requires finite x > 1, got {x}")

    log_x = np.log(x)

    total = one
    term = one
    min_term = np.finfo(dtype).max
    n_terms = 1

    for k in range(1, MAX_TERMS + 1):
        term = term * dtype.type(k)
        term = term / log_x

        if k > SETTLE_TERMS and term > min_term:
            # Series has started to diverge
            break

        if term < min_term:
            min_term = term

        total = total + term
        n_terms += 1

    return total, log_x, n_terms


def li_asym(x: float, dtype=np.float32) -> float:
    """
    Asymptotic approximation of li(x).

    Parameters
    ----------
    x : float
        Finite argument, x > 1.
    dtype : numpy floating dtype
        Working precision (default single precision).

    Returns
    -------
    float
        Estimate of li(x), computed in `dtype`.

    Raises
    ------
    ValueError
        If x <= 1 or x is not finite.
    """
    total, log_x, _ = _expand(x, dtype)
    x = np.dtype(dtype).type(x)
    return float((total * x) / log_x)


def li_asym_terms(x: float, dtype=np.float32) -> int:
    """Number of series terms (including k=0) li_asym uses at x."""
    return _expand(x, dtype)[2]


def li_asym_array(xs, dtype=np.float32) -> np.ndarray:
    """Evaluate li_asym over a 1-D array of arguments."""
    xs = np.asarray(xs, dtype=np.float64)
    return np.array([li_asym(x, dtype) for x in xs], dtype=dtype)


def li_reference(x) -> np.ndarray:
    """
    Exact li(x) = Ei(ln x), via scipy.

    Used to score li_asym; accepts scalars or arrays.
    """
    return expi(np.log(np.asarray(x, dtype=np.float64)))
