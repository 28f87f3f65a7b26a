"""Descriptive statistics and two-version comparisons.

Only basic descriptive statistics are computed: mean, min, max and the
population standard deviation of the run samples, plus signed and
relative differences between the two versions under test.
"""

from __future__ import annotations

import statistics
from dataclasses import dataclass
from typing import Mapping, Sequence

# Marker stored instead of a version identifier when neither side wins.
TIE = "same"


# ---------------------------------------------------------------------------
# Descriptive statistics
# ---------------------------------------------------------------------------


@dataclass
class RunStats:
    """Summary statistics for one version's run samples."""

    n: int
    mean: float
    min: float
    max: float
    std_dev: float  # population standard deviation


def describe(samples: Sequence[float]) -> RunStats:
    """Compute mean, min, max and population standard deviation.

    The deviation divides by ``n`` rather than ``n - 1``, so a single
    sample has a deviation of 0.0.

    Raises:
        ValueError: If *samples* is empty.
    """
    if not samples:
        raise ValueError("Cannot describe an empty sample")

    values = [float(v) for v in samples]
    return RunStats(
        n=len(values),
        mean=statistics.fmean(values),
        min=min(values),
        max=max(values),
        std_dev=statistics.pstdev(values),
    )


# ---------------------------------------------------------------------------
# Two-version comparisons
# ---------------------------------------------------------------------------


@dataclass
class Comparison:
    """Difference in mean build time between the two versions."""

    diff: float  # second minus first
    percent_change: float | None  # relative to the first; None if it is zero
    faster_version: str  # version identifier or TIE


@dataclass
class PackageSizeComparison:
    """Difference in installed package size between the two versions."""

    sizes: dict[str, int]
    diff: int
    percent_change: float | None
    smaller_version: str  # version identifier or TIE


def _relative_change(first: float, second: float) -> tuple[float, float | None, int]:
    """Return ``(diff, percent_change, winner)`` where winner is 0, 1 or -1 for a tie."""
    diff = second - first
    percent = (diff / first) * 100 if first else None
    if diff < 0:
        winner = 1
    elif diff > 0:
        winner = 0
    else:
        winner = -1
    return diff, percent, winner


def compare_means(
    first_version: str,
    first_mean: float,
    second_version: str,
    second_mean: float,
) -> Comparison:
    """Compare two mean build times.

    The version with the strictly lower mean is the faster one; exactly
    equal means are reported as :data:`TIE`.
    """
    diff, percent, winner = _relative_change(first_mean, second_mean)
    names = (first_version, second_version)
    return Comparison(
        diff=diff,
        percent_change=percent,
        faster_version=names[winner] if winner >= 0 else TIE,
    )


def compare_package_sizes(
    first_version: str,
    second_version: str,
    sizes: Mapping[str, int],
) -> PackageSizeComparison | None:
    """Compare the installed sizes of two versions.

    Returns None when either size was not recorded (its install failed).
    """
    if first_version not in sizes or second_version not in sizes:
        return None
    first, second = sizes[first_version], sizes[second_version]
    diff, percent, winner = _relative_change(first, second)
    names = (first_version, second_version)
    return PackageSizeComparison(
        sizes={first_version: first, second_version: second},
        diff=int(diff),
        percent_change=percent,
        smaller_version=names[winner] if winner >= 0 else TIE,
    )
