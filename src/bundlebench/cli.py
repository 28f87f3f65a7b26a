"""Command-line interface for bundlebench.

Subcommands:
    bundlebench run       Benchmark two versions and write the reports
    bundlebench show      Print the summary of a saved results file
    bundlebench render    Regenerate the HTML report from a results file
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from bundlebench import __version__
from bundlebench.bench.config import (
    HTML_FILENAME,
    BenchConfig,
    config_from_profile,
    load_profile,
)
from bundlebench.bench.results import BenchmarkReport, load_results
from bundlebench.logging import setup_logging

log = logging.getLogger("bundlebench")


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """bundlebench — compare build times and sizes of two bundler versions."""


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@main.command()
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML profile with benchmark settings.",
)
@click.option(
    "--version",
    "versions",
    type=str,
    multiple=True,
    help="Version to benchmark, e.g. edge-functions@latest (give exactly two).",
)
@click.option("--package-name", type=str, default=None, help="Package directory to measure.")
@click.option("--preset", type=str, default=None, help="Build preset (default: next).")
@click.option("--entry", type=str, default=None, help="Entry point passed to the build.")
@click.option("--runs", type=int, default=None, help="Builds per version (default: 8).")
@click.option(
    "--project-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project to build (default: current directory).",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Where reports are written (default: benchmark).",
)
@click.option(
    "--skip-package-sizes",
    is_flag=True,
    default=False,
    help="Do not install versions to measure package sizes.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write a DEBUG log to this file.",
)
def run(  # noqa: PLR0913
    profile_path: Path | None,
    versions: tuple[str, ...],
    package_name: str | None,
    preset: str | None,
    entry: str | None,
    runs: int | None,
    project_dir: Path | None,
    output_dir: Path | None,
    skip_package_sizes: bool,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Benchmark builds of two versions and write JSON and HTML reports.

    \b
    Examples:
        bundlebench run --project-dir ./my-app
        bundlebench run --profile bench.yaml --runs 3
        bundlebench run --version edge-functions@4.0.0 \\
            --version edge-functions@latest --preset next
    """
    from bundlebench.bench.display import format_summary
    from bundlebench.bench.html_report import write_html_report
    from bundlebench.bench.runner import BenchError, BenchRunner

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    cli_overrides: dict[str, object] = {
        "versions": list(versions),
        "package_name": package_name,
        "preset": preset,
        "entry": entry,
        "runs": runs,
        "project_dir": project_dir,
        "output_dir": output_dir,
        "measure_package_sizes": False if skip_package_sizes else None,
    }

    try:
        profile_data = load_profile(profile_path) if profile_path else {}
        config = config_from_profile(profile_data, cli_overrides=cli_overrides)
    except (ValueError, FileNotFoundError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    click.echo("\nBenchmarking builds:\n")
    runner = BenchRunner(config)
    try:
        report = runner.run()
    except (ValueError, BenchError) as exc:
        log.debug("Benchmark aborted", exc_info=True)
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        click.echo("\nBenchmark interrupted.", err=True)
        raise SystemExit(130)  # noqa: B904

    write_html_report(
        config.html_path,
        report,
        title=config.title,
        subtitle=config.subtitle,
        labels=config.labels,
    )

    click.echo()
    click.echo(format_summary(report, config.labels))
    click.echo()
    click.echo(f"Results saved to: {config.results_path}")
    click.echo(f"HTML report: {config.html_path}")


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


def _load_or_exit(results_file: Path) -> BenchmarkReport:
    try:
        return load_results(results_file)
    except ValueError as exc:
        click.echo(f"Error: cannot read {results_file}: {exc}", err=True)
        raise SystemExit(1) from exc


def _profile_or_exit(profile_path: Path | None) -> BenchConfig:
    """Config used for titles and labels when re-reading saved results."""
    if profile_path is None:
        return BenchConfig()
    try:
        return config_from_profile(load_profile(profile_path))
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc


@main.command("show")
@click.argument("results_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Profile providing display labels.",
)
def show(results_file: Path, profile_path: Path | None) -> None:
    """Print the summary of a saved benchmark.

    RESULTS_FILE is a benchmark-results.json written by ``run``.
    """
    from bundlebench.bench.display import format_summary

    report = _load_or_exit(results_file)
    click.echo(format_summary(report, _profile_or_exit(profile_path).labels))


# ---------------------------------------------------------------------------
# render
# ---------------------------------------------------------------------------


@main.command("render")
@click.argument("results_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="HTML file to write (default: benchmark-chart.html next to RESULTS_FILE).",
)
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Profile providing title, subtitle and labels.",
)
def render(results_file: Path, output: Path | None, profile_path: Path | None) -> None:
    """Regenerate the HTML chart report from a saved benchmark."""
    from bundlebench.bench.html_report import write_html_report

    report = _load_or_exit(results_file)
    config = _profile_or_exit(profile_path)
    target = output or results_file.parent / HTML_FILENAME
    write_html_report(
        target,
        report,
        title=config.title,
        subtitle=config.subtitle,
        labels=config.labels,
    )
    click.echo(f"HTML report: {target}")


if __name__ == "__main__":
    main()
