"""
Length distribution plots.

Requires the optional plotting dependencies: pip install fastleng[plot]
"""

from pathlib import Path
from typing import Mapping, Optional, Union

import numpy as np

from .length_stats import LengthStats

try:
    import matplotlib
    matplotlib.use('Agg')  # Non-interactive backend
    import matplotlib.pyplot as plt
    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False


def require_matplotlib():
    """Raise ImportError with an install hint when matplotlib is missing"""
    if not HAS_MATPLOTLIB:
        raise ImportError("matplotlib required for plotting: pip install fastleng[plot]")


def histogram_from_counts(length_counts: Mapping[int, int], bins: int = 100):
    """
    Bin a length distribution without expanding it to one value per sequence.

    Returns:
        (counts, edges) as numpy arrays, like numpy.histogram
    """
    if not length_counts:
        return np.zeros(0, dtype=np.int64), np.zeros(0)

    lengths = np.fromiter(length_counts.keys(), dtype=np.float64, count=len(length_counts))
    weights = np.fromiter(length_counts.values(), dtype=np.float64, count=len(length_counts))
    counts, edges = np.histogram(lengths, bins=bins, weights=weights)
    return counts.astype(np.int64), edges


def plot_length_distribution(length_counts: Mapping[int, int], stats: LengthStats,
                             output_path: Union[str, Path], bins: int = 100,
                             log_scale: bool = False, title: Optional[str] = None):
    """Generate a histogram of sequence lengths with mean/median/N50 markers"""

    require_matplotlib()

    counts, edges = histogram_from_counts(length_counts, bins)

    fig, ax = plt.subplots(figsize=(10, 6))

    if len(counts):
        ax.bar(edges[:-1], counts, width=np.diff(edges) * 0.9, align='edge',
               color='steelblue', edgecolor='darkblue', alpha=0.7)

        ax.axvline(stats.mean_length, color='red', linestyle='--', linewidth=2,
                   label=f'Mean: {stats.mean_length:,.0f} bp')
        ax.axvline(stats.median_length, color='green', linestyle='--', linewidth=2,
                   label=f'Median: {stats.median_length:,.0f} bp')
        ax.axvline(stats.n50, color='orange', linestyle='--', linewidth=2,
                   label=f'N50: {stats.n50:,} bp')
        ax.legend(loc='upper right')

    if log_scale:
        ax.set_yscale('log')

    ax.set_xlabel('Sequence Length (bp)', fontsize=12)
    ax.set_ylabel('Count', fontsize=12)
    ax.set_title(title or 'Sequence Length Distribution', fontsize=14, fontweight='bold')
    ax.grid(True, alpha=0.3)

    stats_text = (
        f"Sequences: {stats.total_sequences:,}\n"
        f"Bases: {stats.total_bases:,}\n"
        f"N50: {stats.n50:,} bp\n"
        f"N90: {stats.n90:,} bp"
    )
    ax.text(0.98, 0.70, stats_text, transform=ax.transAxes,
            fontsize=10, verticalalignment='top', horizontalalignment='right',
            bbox=dict(boxstyle='round', facecolor='wheat', alpha=0.5))

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
