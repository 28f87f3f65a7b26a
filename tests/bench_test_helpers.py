"""Shared test fixtures for benchmark tests."""

from __future__ import annotations

from pathlib import Path

from bundlebench.bench.config import BenchConfig
from bundlebench.bench.results import BenchmarkReport, VersionResult
from bundlebench.bench.stats import compare_means, compare_package_sizes

VERSION_A = "edge-functions@5.0.0-stage.1"
VERSION_B = "edge-functions@latest"


def make_version_result(
    version: str,
    runs: list[float],
    *,
    build_size: int = 4096,
    package_size: int | None = None,
) -> VersionResult:
    """Create a VersionResult with computed stats."""
    vr = VersionResult(
        version=version,
        runs=list(runs),
        build_size=build_size,
        package_size=package_size,
        timestamp="2026-01-01T00:00:00+00:00",
    )
    vr.compute_stats()
    return vr


def make_report(
    runs_a: list[float] | None = None,
    runs_b: list[float] | None = None,
    *,
    package_sizes: dict[str, int] | None = None,
) -> BenchmarkReport:
    """Create a fully aggregated two-version report."""
    if package_sizes is None:
        package_sizes = {VERSION_A: 1_000_000, VERSION_B: 1_500_000}
    a = make_version_result(
        VERSION_A, runs_a or [10.0, 10.0], package_size=package_sizes.get(VERSION_A)
    )
    b = make_version_result(
        VERSION_B, runs_b or [8.0, 8.0], package_size=package_sizes.get(VERSION_B)
    )
    return BenchmarkReport(
        versions={VERSION_A: a, VERSION_B: b},
        comparison=compare_means(VERSION_A, a.average, VERSION_B, b.average),
        package_sizes=dict(package_sizes),
        package_size_comparison=compare_package_sizes(VERSION_A, VERSION_B, package_sizes),
    )


def make_config(tmpdir: str | Path, **kwargs: object) -> BenchConfig:
    """Create a BenchConfig rooted in *tmpdir* with sensible test defaults."""
    root = Path(tmpdir)
    defaults: dict[str, object] = {
        "versions": [VERSION_A, VERSION_B],
        "runs": 3,
        "project_dir": root,
        "output_dir": root / "benchmark",
    }
    defaults.update(kwargs)
    return BenchConfig(**defaults)  # type: ignore[arg-type]
