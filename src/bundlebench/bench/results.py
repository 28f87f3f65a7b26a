"""Benchmark result data structures and serialization.

Hierarchy::

    BenchmarkReport (one benchmark execution)
      → versions: dict[str, VersionResult]   (exactly two, in order)
      → comparison: Comparison
      → package_sizes: dict[str, int]
      → package_size_comparison: PackageSizeComparison | None

The serialized form is a flat JSON object keyed by version identifier,
plus the reserved ``packageSizes``, ``comparison`` and
``packageSizeComparison`` keys. The same object is written to
``benchmark-results.json`` and embedded in the HTML report.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from bundlebench.bench.stats import (
    Comparison,
    PackageSizeComparison,
    describe,
)

log = logging.getLogger("bundlebench")

PACKAGE_SIZES_KEY = "packageSizes"
COMPARISON_KEY = "comparison"
PACKAGE_SIZE_COMPARISON_KEY = "packageSizeComparison"
RESERVED_KEYS = frozenset({PACKAGE_SIZES_KEY, COMPARISON_KEY, PACKAGE_SIZE_COMPARISON_KEY})


# ---------------------------------------------------------------------------
# Version-level result
# ---------------------------------------------------------------------------


@dataclass
class VersionResult:
    """Timing and size measurements for one version under test."""

    version: str
    runs: list[float] = field(default_factory=list)
    average: float = 0.0
    min: float = 0.0
    max: float = 0.0
    std_dev: float = 0.0
    build_size: int = 0  # sampled after the first run only
    package_size: int | None = None
    timestamp: str = ""

    def compute_stats(self) -> None:
        """Fill in average/min/max/std_dev from the run samples."""
        stats = describe(self.runs)
        self.average = stats.mean
        self.min = stats.min
        self.max = stats.max
        self.std_dev = stats.std_dev

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "buildSize": self.build_size,
            "packageSize": self.package_size,
            "runs": list(self.runs),
            "average": self.average,
            "min": self.min,
            "max": self.max,
            "stdDev": self.std_dev,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, version: str, data: dict[str, Any]) -> VersionResult:
        """Deserialize from a dict."""
        return cls(
            version=version,
            runs=[float(r) for r in data.get("runs", [])],
            average=data.get("average", 0.0),
            min=data.get("min", 0.0),
            max=data.get("max", 0.0),
            std_dev=data.get("stdDev", 0.0),
            build_size=data.get("buildSize", 0),
            package_size=data.get("packageSize"),
            timestamp=data.get("timestamp", ""),
        )


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


def _comparison_to_dict(comparison: Comparison) -> dict[str, Any]:
    return {
        "diff": comparison.diff,
        "percentChange": comparison.percent_change,
        "fasterVersion": comparison.faster_version,
    }


def _package_comparison_to_dict(comparison: PackageSizeComparison) -> dict[str, Any]:
    return {
        "sizes": dict(comparison.sizes),
        "diff": comparison.diff,
        "percentChange": comparison.percent_change,
        "smallerVersion": comparison.smaller_version,
    }


@dataclass
class BenchmarkReport:
    """Root object of a benchmark execution."""

    versions: dict[str, VersionResult] = field(default_factory=dict)
    comparison: Comparison | None = None
    package_sizes: dict[str, int] = field(default_factory=dict)
    package_size_comparison: PackageSizeComparison | None = None

    @property
    def version_names(self) -> list[str]:
        """Version identifiers in measurement order."""
        return list(self.versions)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the flat JSON shape used on disk and in the HTML report."""
        d: dict[str, Any] = {name: vr.to_dict() for name, vr in self.versions.items()}
        d[PACKAGE_SIZES_KEY] = dict(self.package_sizes)
        if self.comparison is not None:
            d[COMPARISON_KEY] = _comparison_to_dict(self.comparison)
        if self.package_size_comparison is not None:
            d[PACKAGE_SIZE_COMPARISON_KEY] = _package_comparison_to_dict(
                self.package_size_comparison
            )
        return d

    def to_json(self) -> str:
        """Serialize to indented JSON text."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BenchmarkReport:
        """Deserialize from the flat JSON shape."""
        report = cls()
        for key, value in data.items():
            if key in RESERVED_KEYS:
                continue
            if not isinstance(value, dict):
                raise ValueError(f"Version entry {key!r} must be an object")
            report.versions[key] = VersionResult.from_dict(key, value)

        report.package_sizes = {k: int(v) for k, v in data.get(PACKAGE_SIZES_KEY, {}).items()}

        comp = data.get(COMPARISON_KEY)
        if comp:
            report.comparison = Comparison(
                diff=comp.get("diff", 0.0),
                percent_change=comp.get("percentChange"),
                faster_version=comp.get("fasterVersion", ""),
            )

        pkg_comp = data.get(PACKAGE_SIZE_COMPARISON_KEY)
        if pkg_comp:
            report.package_size_comparison = PackageSizeComparison(
                sizes={k: int(v) for k, v in pkg_comp.get("sizes", {}).items()},
                diff=pkg_comp.get("diff", 0),
                percent_change=pkg_comp.get("percentChange"),
                smaller_version=pkg_comp.get("smallerVersion", ""),
            )
        return report


# ---------------------------------------------------------------------------
# I/O functions
# ---------------------------------------------------------------------------


def save_results(path: Path, report: BenchmarkReport) -> None:
    """Write the report as indented JSON, overwriting *path*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report.to_json() + "\n", encoding="utf-8")
    log.info("Results saved to %s", path)


def load_results(path: Path) -> BenchmarkReport:
    """Load a report previously written by :func:`save_results`.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file is not a JSON object in the expected shape.
    """
    if not path.exists():
        raise FileNotFoundError(f"No results file at {path}")
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Results file must contain a JSON object, got {type(data).__name__}")
    return BenchmarkReport.from_dict(data)
