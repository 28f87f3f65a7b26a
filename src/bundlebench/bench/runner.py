"""Benchmark execution engine.

Orchestrates, strictly in this order:
1. Configuration validation
2. Installed package size measurement (all versions)
3. Repeated clean builds per version with timing capture
4. Statistics and version comparisons
5. Writing the JSON results file

Nothing runs concurrently: builds share the project directory, so each
repetition starts and ends with the build outputs removed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from bundlebench.bench.config import BenchConfig, validate_config
from bundlebench.bench.fs import build_output_size, clean_paths
from bundlebench.bench.packages import measure_package_sizes
from bundlebench.bench.results import BenchmarkReport, VersionResult, save_results
from bundlebench.bench.stats import compare_means, compare_package_sizes
from bundlebench.bench.timing import TimedResult, run_timed
from bundlebench.formatting import format_bytes, format_section_header, format_seconds

log = logging.getLogger("bundlebench")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class BenchError(Exception):
    """Base class for errors that abort a benchmark."""


class BuildError(BenchError):
    """A build invocation failed during the timing phase."""

    def __init__(self, version: str, result: TimedResult) -> None:
        self.version = version
        self.result = result
        detail = result.error or f"exit code {result.exit_code}"
        super().__init__(f"Build with {version} failed: {result.command_line} ({detail})")


# ---------------------------------------------------------------------------
# Progress callback
# ---------------------------------------------------------------------------


@dataclass
class BenchProgress:
    """Progress info passed to the callback after each repetition."""

    version: str
    run: int  # 1-based
    total_runs: int
    wall_time_s: float
    build_size: int | None = None  # only on the first run


ProgressCallback = Callable[[BenchProgress], None]


def _default_progress(progress: BenchProgress) -> None:
    log.info("Time: %s", format_seconds(progress.wall_time_s))
    if progress.build_size is not None:
        log.info("Build size: %s", format_bytes(progress.build_size))


# ---------------------------------------------------------------------------
# Build timing
# ---------------------------------------------------------------------------


def clean_build_outputs(config: BenchConfig) -> list[str]:
    """Remove build outputs and generated config files from the project.

    Safe to call on an already clean project.
    """
    return clean_paths(config.project_dir, config.clean_targets)


def time_version(
    config: BenchConfig,
    version: str,
    progress: ProgressCallback | None = None,
) -> VersionResult:
    """Run ``config.runs`` clean builds of *version* and time each one.

    The build output size is measured after the first run only.

    Raises:
        BuildError: If any build exits with a non-zero status.
    """
    report_progress = progress or _default_progress
    result = VersionResult(version=version)

    log.info("Cleaning previous builds...")
    clean_build_outputs(config)

    command = config.build_command(version)
    for i in range(1, config.runs + 1):
        log.info("")
        log.info("Run %d:", i)
        timed = run_timed(command, cwd=config.project_dir)
        if not timed.ok:
            raise BuildError(version, timed)
        result.runs.append(timed.wall_time_s)

        build_size = None
        if i == 1:
            build_size = build_output_size(config.project_dir, config.output_dirs)
            result.build_size = build_size

        report_progress(
            BenchProgress(
                version=version,
                run=i,
                total_runs=config.runs,
                wall_time_s=timed.wall_time_s,
                build_size=build_size,
            )
        )
        clean_build_outputs(config)

    result.compute_stats()
    result.timestamp = datetime.now(timezone.utc).isoformat()
    return result


# ---------------------------------------------------------------------------
# BenchRunner
# ---------------------------------------------------------------------------


class BenchRunner:
    """Executes a benchmark run according to a BenchConfig.

    Usage::

        runner = BenchRunner(BenchConfig(project_dir=Path("my-app")))
        report = runner.run()
    """

    def __init__(
        self,
        config: BenchConfig,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        self.config = config
        self.progress = progress_callback or _default_progress

    def run(self) -> BenchmarkReport:
        """Execute the full benchmark and write the results file.

        Raises:
            ValueError: If the configuration is invalid.
            BuildError: If a build fails; no results file is written.
        """
        errors = validate_config(self.config)
        for w in (e for e in errors if e.severity == "warning"):
            log.warning("Config warning: %s: %s", w.field, w.message)
        fatal = [e for e in errors if e.severity == "error"]
        if fatal:
            messages = [f"  {e.field}: {e.message}" for e in fatal]
            raise ValueError("Invalid benchmark configuration:\n" + "\n".join(messages))

        report = BenchmarkReport()

        if self.config.measure_package_sizes:
            log.info(format_section_header("Measuring package sizes"))
            report.package_sizes = measure_package_sizes(self.config)
        else:
            log.info("Skipping package size measurement.")

        for version in self.config.versions:
            log.info("")
            log.info(format_section_header(f"Testing {version}"))
            vr = time_version(self.config, version, self.progress)
            vr.package_size = report.package_sizes.get(version)
            report.versions[version] = vr
            log.info("")
            log.info("Results for %s:", version)
            log.info("- Average: %s", format_seconds(vr.average))
            log.info("- Min: %s", format_seconds(vr.min))
            log.info("- Max: %s", format_seconds(vr.max))
            log.info("- Std dev: %s", format_seconds(vr.std_dev))
            log.info("- Build size: %s", format_bytes(vr.build_size))

        first, second = self.config.versions
        report.comparison = compare_means(
            first,
            report.versions[first].average,
            second,
            report.versions[second].average,
        )
        report.package_size_comparison = compare_package_sizes(
            first, second, report.package_sizes
        )

        save_results(self.config.results_path, report)
        return report
