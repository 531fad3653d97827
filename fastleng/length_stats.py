"""
Summary statistics over a sequence length distribution.

A length distribution maps sequence length to the number of sequences with
that length. Every function here is pure: the distribution is only read.

Usage:
    from collections import Counter
    from fastleng.length_stats import compute_length_stats

    stats = compute_length_stats(Counter({5: 10, 10: 3}))
    stats.total_bases   # 80
    stats.n50           # 5
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Tuple

# Percentiles every report carries as named fields
STANDARD_N_SCORES = (10, 25, 50, 75, 90)


def compute_total_counts(length_counts: Mapping[int, int]) -> Tuple[int, int]:
    """
    Compute total bases and total sequences in one pass.

    Args:
        length_counts: Sequence length -> number of sequences with that length

    Returns:
        (total_bases, total_seqs), (0, 0) for an empty distribution
    """
    total_bases = 0
    total_seqs = 0
    for length, count in sorted(length_counts.items()):
        total_bases += length * count
        total_seqs += count
    return total_bases, total_seqs


def compute_mean_length(total_bases: int, total_seqs: int) -> float:
    """Mean sequence length; nan when there are no sequences (0/0)."""
    if total_seqs == 0:
        return float("nan")
    return total_bases / total_seqs


def compute_median_length(length_counts: Mapping[int, int], total_seqs: int) -> float:
    """
    Compute the median length of the sequences in a distribution.

    The middle index is total_seqs // 2 and the result is the length holding
    that index in ascending order. For an even number of sequences this is the
    upper of the two middle values rather than their mean, e.g. lengths
    1, 2, 3, 4 give 3.0.

    Args:
        length_counts: Sequence length -> number of sequences with that length
        total_seqs: Number of sequences, see compute_total_counts()

    Returns:
        Median length, 0.0 for an empty distribution
    """
    middle_seq_index = total_seqs // 2
    total_observed = 0
    for seq_len, seq_count in sorted(length_counts.items()):
        total_observed += seq_count
        if total_observed > middle_seq_index:
            return float(seq_len)

    # only reachable for an empty distribution
    return 0.0


def compute_n_score(length_counts: Mapping[int, int], total_bases: int, target: int) -> int:
    """
    Compute an N-score (e.g. N50) for a length distribution.

    The N-score is the minimum length such that sequences of at least that
    length contain at least target% of all bases. Lengths are visited from
    longest to shortest and the first length whose cumulative base count
    reaches the target is returned.

    Args:
        length_counts: Sequence length -> number of sequences with that length
        total_bases: Number of bases, see compute_total_counts()
        target: Percentile in 1..99; 50 for N50, 90 for N90

    Returns:
        The N-score length, 0 for an empty distribution

    Raises:
        ValueError: if target is outside 1..99
    """
    if isinstance(target, bool) or not isinstance(target, int) or not 1 <= target <= 99:
        raise ValueError(f"N-score target must be an integer in 1..99, got {target!r}")

    target_bases = target * total_bases / 100
    current_bases = 0
    for seq_len, seq_count in sorted(length_counts.items(), reverse=True):
        current_bases += seq_len * seq_count
        if float(current_bases) >= target_bases:
            return seq_len

    # only reachable for an empty distribution
    return 0


@dataclass(frozen=True)
class LengthStats:
    """Summary statistics for a length distribution"""
    total_bases: int
    total_sequences: int
    mean_length: float
    median_length: float
    n10: int
    n25: int
    n50: int
    n75: int
    n90: int
    # Additional requested percentile -> N-score
    extra_n_scores: Dict[int, int] = field(default_factory=dict)

    def n_score(self, target: int) -> int:
        """Look up a computed N-score by percentile."""
        if target in STANDARD_N_SCORES:
            return getattr(self, f"n{target}")
        try:
            return self.extra_n_scores[target]
        except KeyError:
            raise KeyError(f"N{target} was not computed for this report") from None

    def to_dict(self) -> dict:
        """Flat report with n<T> keys for every computed N-score."""
        result = {
            "total_bases": self.total_bases,
            "total_sequences": self.total_sequences,
            "mean_length": self.mean_length,
            "median_length": self.median_length,
        }
        for target in STANDARD_N_SCORES:
            result[f"n{target}"] = getattr(self, f"n{target}")
        for target in sorted(self.extra_n_scores):
            result[f"n{target}"] = self.extra_n_scores[target]
        return result


def compute_length_stats(
    length_counts: Mapping[int, int],
    extra_targets: Iterable[int] = ()
) -> LengthStats:
    """
    Compute the full summary report for a length distribution.

    Args:
        length_counts: Sequence length -> number of sequences with that length
        extra_targets: Percentiles to compute beyond N10/N25/N50/N75/N90

    Returns:
        LengthStats
    """
    total_bases, total_seqs = compute_total_counts(length_counts)
    median_length = compute_median_length(length_counts, total_seqs)

    n_scores = {
        target: compute_n_score(length_counts, total_bases, target)
        for target in STANDARD_N_SCORES
    }
    extra_n_scores = {
        target: compute_n_score(length_counts, total_bases, target)
        for target in sorted(set(extra_targets))
        if target not in STANDARD_N_SCORES
    }

    return LengthStats(
        total_bases=total_bases,
        total_sequences=total_seqs,
        mean_length=compute_mean_length(total_bases, total_seqs),
        median_length=median_length,
        n10=n_scores[10],
        n25=n_scores[25],
        n50=n_scores[50],
        n75=n_scores[75],
        n90=n_scores[90],
        extra_n_scores=extra_n_scores,
    )
