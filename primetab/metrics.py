"""
Definitions of all reported statistics.

Responsibility: comparison quantities for pi(x) and its estimators.
"""

import numpy as np
import pandas as pd

from .li import li_asym, li_asym_terms, li_reference


def pi_table(x_values, primes: np.ndarray) -> np.ndarray:
    """
    Exact pi(x) for each x.

    Parameters
    ----------
    x_values : array-like
        Points at which to count primes.
    primes : np.ndarray
        Sorted primes covering at least [2, max(x_values)].

    Returns
    -------
    np.ndarray
        int64 array, number of primes <= x.
    """
    x_values = np.asarray(x_values)
    return np.searchsorted(primes, x_values, side='right').astype(np.int64)


def relative_error(estimate, exact):
    """(estimate - exact) / exact, NaN where exact is 0."""
    estimate = np.asarray(estimate, dtype=np.float64)
    exact = np.asarray(exact, dtype=np.float64)
    with np.errstate(divide='ignore', invalid='ignore'):
        return np.where(exact != 0, (estimate - exact) / exact, np.nan)


def pi_vs_li(x_values, primes: np.ndarray, dtype=np.float32) -> pd.DataFrame:
    """
    Compare pi(x) with li_asym(x), exact li(x) and x / ln x.

    Parameters
    ----------
    x_values : array-like
        Grid of x > 1.
    primes : np.ndarray
        Sorted primes covering the grid.
    dtype : numpy floating dtype
        Working precision for li_asym.

    Returns
    -------
    pd.DataFrame
        One row per x.
    """
    x = np.asarray(x_values, dtype=np.float64)
    pi = pi_table(x, primes)
    est = np.array([li_asym(v, dtype) for v in x])
    x_over_log_x = x / np.log(x)

    return pd.DataFrame({
        'x': x,
        'pi': pi,
        'li_asym': est,
        'li_exact': li_reference(x),
        'x_over_log_x': x_over_log_x,
        'terms': [li_asym_terms(v, dtype) for v in x],
        'rel_err_li_asym': relative_error(est, pi),
        'rel_err_x_over_log_x': relative_error(x_over_log_x, pi),
    })
