"""fastleng - sequence length statistics

Computes total bases, sequence counts, mean, median and N-scores (N10, N25,
N50, N75, N90, ...) for FASTA/FASTQ/SAM/BAM files without keeping sequences
in memory.

Usage:
    from fastleng import gather_multifastx_stats, compute_length_stats

    counts = gather_multifastx_stats(["reads.fq.gz"])
    stats = compute_length_stats(counts)
    print(stats.n50)
"""

__version__ = "0.2.0"

VERSION_INFO = {
    "major": 0,
    "minor": 2,
    "patch": 0,
}


# Logging configuration - import on demand to avoid circular imports
def get_logger(name: str):
    """Get a logger for a module. Lazy import to avoid startup overhead."""
    from .logging_config import get_logger as _get_logger
    return _get_logger(name)


def setup_logging(**kwargs):
    """Setup logging configuration. Lazy import to avoid startup overhead."""
    from .logging_config import setup_logging as _setup_logging
    return _setup_logging(**kwargs)


# Loaders - import on demand so pysam is only loaded when reading files
def gather_stats(filename, initial_counts=None, **kwargs):
    """Gather lengths from one file. Lazy import to avoid startup overhead."""
    from .loaders import gather_stats as _gather_stats
    return _gather_stats(filename, initial_counts, **kwargs)


def gather_multifastx_stats(filenames, **kwargs):
    """Gather lengths from several files. Lazy import to avoid startup overhead."""
    from .loaders import gather_multifastx_stats as _gather_multifastx_stats
    return _gather_multifastx_stats(filenames, **kwargs)


# Statistics
def compute_length_stats(length_counts, extra_targets=()):
    """Compute the summary report. Lazy import to avoid startup overhead."""
    from .length_stats import compute_length_stats as _compute_length_stats
    return _compute_length_stats(length_counts, extra_targets)


# Configuration utilities - import on demand
def load_config(path=None):
    """Load configuration from file. Lazy import to avoid startup overhead."""
    from .config import load_config as _load_config
    return _load_config(path)
