"""Tests for fastleng.length_stats: totals, mean, median, N-scores"""

import math
import random
from collections import Counter

import pytest

from fastleng.length_stats import (
    LengthStats,
    compute_length_stats,
    compute_mean_length,
    compute_median_length,
    compute_n_score,
    compute_total_counts,
)


def counts_of(*pairs):
    return Counter(dict(pairs))


# =============================================================================
# Totals
# =============================================================================

def test_total_counts_basic():
    """Totals over a small mixed distribution"""
    assert compute_total_counts(counts_of((5, 10), (10, 3))) == (80, 13)


def test_total_counts_single_length():
    """All sequences the same length"""
    assert compute_total_counts(counts_of((10, 100))) == (1000, 100)


def test_total_counts_empty():
    """Empty distribution has zero totals"""
    assert compute_total_counts(Counter()) == (0, 0)


def test_total_counts_large_values():
    """Counts beyond 32/64-bit ranges do not overflow"""
    huge = 2 ** 70
    total_bases, total_seqs = compute_total_counts({1000: huge})
    assert total_seqs == huge
    assert total_bases == 1000 * huge


# =============================================================================
# Mean
# =============================================================================

def test_mean_length():
    """Mean is bases / sequences as a float"""
    assert compute_mean_length(80, 13) == pytest.approx(80 / 13)
    assert compute_mean_length(1000, 100) == 10.0


def test_mean_length_empty_is_nan():
    """0/0 gives nan instead of raising"""
    assert math.isnan(compute_mean_length(0, 0))


# =============================================================================
# Median
# =============================================================================

def test_median_basic():
    """Median of ten 5s and three 10s"""
    counts = counts_of((5, 10), (10, 3))
    assert compute_median_length(counts, 13) == 5.0


def test_median_odd():
    """Odd number of sequences gives the true median"""
    counts = counts_of((1, 1), (2, 1), (3, 1))
    _, total_seqs = compute_total_counts(counts)
    assert compute_median_length(counts, total_seqs) == 2.0


def test_median_even_takes_upper_middle():
    """Even count returns the value at index n // 2, not the mean of the middle pair"""
    counts = counts_of((1, 1), (2, 1), (3, 1), (4, 1))
    _, total_seqs = compute_total_counts(counts)
    assert compute_median_length(counts, total_seqs) == 3.0


def test_median_even_same_middle_bucket():
    """Both middle values in the same bucket"""
    counts = counts_of((1, 1), (2, 2), (3, 1))
    _, total_seqs = compute_total_counts(counts)
    assert compute_median_length(counts, total_seqs) == 2.0


def test_median_even_boundary():
    """Index n // 2 falls on the first sequence of the next bucket"""
    counts = counts_of((2, 3), (3, 2), (4, 1))
    _, total_seqs = compute_total_counts(counts)
    assert compute_median_length(counts, total_seqs) == 3.0


def test_median_empty():
    """Empty distribution has median 0.0"""
    assert compute_median_length(Counter(), 0) == 0.0


def test_median_returns_float():
    """Median is always a float"""
    median = compute_median_length({7: 1}, 1)
    assert isinstance(median, float)
    assert median == 7.0


# =============================================================================
# N-scores
# =============================================================================

def test_n_score_basic():
    """N50 of ten 5s and three 10s"""
    assert compute_n_score(counts_of((5, 10), (10, 3)), 80, 50) == 5


def test_n_score_small_distributions():
    """N50 for several small distributions"""
    cases = [
        (counts_of((1, 1), (2, 1), (3, 1)), 3),
        (counts_of((1, 1), (2, 1), (3, 1), (4, 1)), 3),
        (counts_of((1, 1), (2, 2), (3, 1)), 2),
        (counts_of((2, 3), (3, 2), (4, 1)), 3),
    ]
    for counts, expected in cases:
        total_bases, _ = compute_total_counts(counts)
        assert compute_n_score(counts, total_bases, 50) == expected


def test_n_score_exact_boundary():
    """Reaching the target exactly counts as reaching it"""
    counts = counts_of((1, 1000), (1000, 1))
    total_bases, _ = compute_total_counts(counts)
    assert compute_n_score(counts, total_bases, 50) == 1000
    assert compute_n_score(counts, total_bases, 51) == 1

    counts = counts_of((1, 1001), (1000, 1))
    total_bases, _ = compute_total_counts(counts)
    assert compute_n_score(counts, total_bases, 50) == 1
    assert compute_n_score(counts, total_bases, 49) == 1000


def test_n_score_bound_holds_for_every_target():
    """Sequences at least as long as N<t> hold at least t% of bases"""
    counts = Counter({length: 1 for length in range(1, 101)})
    total_bases, _ = compute_total_counts(counts)

    for target in range(1, 100):
        n_score = compute_n_score(counts, total_bases, target)
        covered = sum(length * count for length, count in counts.items() if length >= n_score)
        assert covered >= total_bases * (target / 100.0)


def test_n_score_empty():
    """Empty distribution has N-score 0"""
    for target in (1, 50, 99):
        assert compute_n_score(Counter(), 0, target) == 0


def test_n_score_zero_length_sequences():
    """Only zero-length sequences: N-score is 0"""
    assert compute_n_score({0: 5}, 0, 50) == 0


@pytest.mark.parametrize("target", [0, 100, -1, 150])
def test_n_score_target_out_of_range(target):
    """Targets outside 1..99 are rejected, not clamped"""
    with pytest.raises(ValueError):
        compute_n_score(counts_of((5, 10)), 50, target)


def test_n_score_rejects_non_integer_target():
    """Float targets are rejected"""
    with pytest.raises(ValueError):
        compute_n_score(counts_of((5, 10)), 50, 50.0)


def test_n_scores_are_non_increasing():
    """Higher targets never give longer N-scores"""
    rng = random.Random(7)
    counts = Counter(rng.randint(1, 5000) for _ in range(2000))
    total_bases, _ = compute_total_counts(counts)
    scores = [compute_n_score(counts, total_bases, t) for t in range(1, 100)]
    assert scores == sorted(scores, reverse=True)


# =============================================================================
# Full report
# =============================================================================

def test_full_all_same():
    """Report for a distribution with a single length"""
    stats = compute_length_stats(counts_of((10, 100)))
    assert stats == LengthStats(
        total_bases=1000,
        total_sequences=100,
        mean_length=10.0,
        median_length=10.0,
        n10=10,
        n25=10,
        n50=10,
        n75=10,
        n90=10,
    )


def test_full_single_sequence():
    """A single sequence of length 1"""
    stats = compute_length_stats({1: 1})
    assert stats.total_bases == 1
    assert stats.total_sequences == 1
    assert stats.mean_length == 1.0
    assert stats.median_length == 1.0
    assert (stats.n10, stats.n25, stats.n50, stats.n75, stats.n90) == (1, 1, 1, 1, 1)


def test_full_empty():
    """Empty distribution produces a report without raising"""
    stats = compute_length_stats(Counter())
    assert stats.total_bases == 0
    assert stats.total_sequences == 0
    assert stats.median_length == 0.0
    assert math.isnan(stats.mean_length)
    assert (stats.n10, stats.n25, stats.n50, stats.n75, stats.n90) == (0, 0, 0, 0, 0)


def test_full_basic_totals():
    """Report totals match compute_total_counts"""
    stats = compute_length_stats(counts_of((5, 10), (10, 3)))
    assert stats.total_bases == 80
    assert stats.total_sequences == 13
    assert stats.n50 == 5


def test_insertion_order_does_not_matter():
    """Building the distribution in a different order changes nothing"""
    pairs = [(50, 2), (1000, 1), (100, 2), (150, 2)]
    forward = compute_length_stats(dict(pairs))
    backward = compute_length_stats(dict(reversed(pairs)))
    assert forward == backward


def test_extra_n_scores():
    """Extra targets are computed and flattened into the report"""
    counts = Counter({length: 1 for length in range(1, 101)})
    total_bases, _ = compute_total_counts(counts)

    stats = compute_length_stats(counts, extra_targets=[95, 50, 5, 95])
    assert stats.extra_n_scores == {
        5: compute_n_score(counts, total_bases, 5),
        95: compute_n_score(counts, total_bases, 95),
    }
    assert stats.n_score(95) == stats.extra_n_scores[95]
    assert stats.n_score(50) == stats.n50

    keys = list(stats.to_dict())
    assert keys == [
        "total_bases", "total_sequences", "mean_length", "median_length",
        "n10", "n25", "n50", "n75", "n90", "n5", "n95",
    ]


def test_extra_n_scores_out_of_range():
    """Invalid extra targets fail"""
    with pytest.raises(ValueError):
        compute_length_stats({10: 1}, extra_targets=[100])


def test_n_score_lookup_missing():
    """Asking for a percentile that was not computed raises KeyError"""
    stats = compute_length_stats({10: 1})
    with pytest.raises(KeyError):
        stats.n_score(33)


def test_report_is_immutable():
    """LengthStats cannot be modified"""
    stats = compute_length_stats({10: 1})
    with pytest.raises(AttributeError):
        stats.n50 = 3


def test_to_dict_fields():
    """Serialized report has the documented field names"""
    d = compute_length_stats(counts_of((5, 10), (10, 3))).to_dict()
    assert d == {
        "total_bases": 80,
        "total_sequences": 13,
        "mean_length": pytest.approx(80 / 13),
        "median_length": 5.0,
        "n10": 10,
        "n25": 10,
        "n50": 5,
        "n75": 5,
        "n90": 5,
    }
