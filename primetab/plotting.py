"""
Visualization utilities.

Responsibility: plots only. No logic, no computation.
"""

import pandas as pd
import matplotlib.pyplot as plt
from pathlib import Path
from typing import Optional


def plot_pi_vs_li(df: pd.DataFrame, output_path: Optional[Path] = None) -> plt.Figure:
    """
    Plot pi(x) against its estimators, with a relative-error panel.

    Parameters
    ----------
    df : pd.DataFrame
        DataFrame from metrics.pi_vs_li.
    output_path : Path, optional
        If provided, save figure to this path.

    Returns
    -------
    matplotlib.Figure
    """
    fig, (ax_count, ax_err) = plt.subplots(2, 1, figsize=(10, 10), sharex=True)

    ax_count.plot(df['x'], df['pi'], 'o-', label='pi(x)')
    ax_count.plot(df['x'], df['li_asym'], 's--', label='li_asym(x)')
    ax_count.plot(df['x'], df['li_exact'], ':', label='li(x)')
    ax_count.plot(df['x'], df['x_over_log_x'], '^-', label='x / ln x')
    ax_count.set_xscale('log')
    ax_count.set_yscale('log')
    ax_count.set_ylabel('Count')
    ax_count.set_title('Prime counting vs logarithmic integral')
    ax_count.legend()
    ax_count.grid(True, alpha=0.3)

    ax_err.plot(df['x'], df['rel_err_li_asym'], 's--', label='li_asym(x)')
    ax_err.plot(df['x'], df['rel_err_x_over_log_x'], '^-', label='x / ln x')
    ax_err.axhline(0, color='black', linewidth=0.8)
    ax_err.set_xscale('log')
    ax_err.set_xlabel('x')
    ax_err.set_ylabel('Relative error vs pi(x)')
    ax_err.legend()
    ax_err.grid(True, alpha=0.3)

    plt.tight_layout()

    if output_path:
        fig.savefig(output_path, dpi=150, bbox_inches='tight')

    return fig
