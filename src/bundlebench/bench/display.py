"""Terminal display formatting for benchmark results.

Produces the stats table and the natural-language comparison sentences
printed after a run and by ``bundlebench show``.
"""

from __future__ import annotations

from typing import Mapping

from bundlebench.bench.results import BenchmarkReport
from bundlebench.bench.stats import TIE
from bundlebench.formatting import (
    format_bytes,
    format_pct,
    format_section_header,
    format_seconds,
    format_table,
)


def _label(version: str, labels: Mapping[str, str] | None) -> str:
    return (labels or {}).get(version) or version


def time_comparison_sentence(
    report: BenchmarkReport,
    labels: Mapping[str, str] | None = None,
) -> str:
    """Describe which version builds faster.

    Example: ``'B is 20.00% faster than A (2.00s saved)'``.
    """
    comp = report.comparison
    names = report.version_names
    if comp is None or len(names) != 2:
        return "No timing comparison available."

    first, second = (_label(n, labels) for n in names)
    if comp.faster_version == TIE:
        return f"{second} performs the same as {first}"

    pct = "N/A" if comp.percent_change is None else f"{abs(comp.percent_change):.2f}%"
    saved = format_seconds(abs(comp.diff))
    if comp.faster_version == names[1]:
        return f"{second} is {pct} faster than {first} ({saved} saved)"
    return f"{first} is {pct} faster than {second} ({saved} saved)"


def size_comparison_sentence(
    report: BenchmarkReport,
    labels: Mapping[str, str] | None = None,
) -> str:
    """Describe the installed size of the first version relative to the second."""
    comp = report.package_size_comparison
    names = report.version_names
    if comp is None or len(names) != 2:
        return "No package size comparison available."

    first, second = (_label(n, labels) for n in names)
    if comp.smaller_version == TIE:
        return f"{first} and {second} have the same package size"

    pct = "N/A" if comp.percent_change is None else f"{abs(comp.percent_change):.2f}%"
    delta = format_bytes(abs(comp.diff))
    if comp.diff > 0:
        return f"{first} is {pct} smaller than {second} ({delta} saved)"
    return f"{first} is {pct} larger than {second} ({delta} extra)"


def format_summary(
    report: BenchmarkReport,
    labels: Mapping[str, str] | None = None,
) -> str:
    """Format a complete benchmark report for the terminal."""
    lines: list[str] = []

    rows: list[list[str]] = []
    for name, vr in report.versions.items():
        rows.append(
            [
                _label(name, labels),
                str(len(vr.runs)),
                format_seconds(vr.average),
                format_seconds(vr.min),
                format_seconds(vr.max),
                format_seconds(vr.std_dev),
                format_bytes(vr.build_size),
                format_bytes(report.package_sizes.get(name)),
            ]
        )
    lines.append(format_section_header("Results"))
    lines.append(
        format_table(
            ["Version", "Runs", "Mean", "Min", "Max", "Std dev", "Build", "Package"],
            rows,
            alignments=["l", "r", "r", "r", "r", "r", "r", "r"],
        )
    )
    lines.append("")

    lines.append(format_section_header("Comparison"))
    comp = report.comparison
    names = report.version_names
    if comp is not None and len(names) == 2:
        first, second = (_label(n, labels) for n in names)
        lines.append(
            f"  Difference ({second} vs {first}): "
            f"{format_seconds(comp.diff)} ({format_pct(comp.percent_change)})"
        )
    lines.append(f"  {time_comparison_sentence(report, labels)}")
    lines.append("")

    lines.append(format_section_header("Package size comparison"))
    for name in names:
        lines.append(f"  {_label(name, labels)}: {format_bytes(report.package_sizes.get(name))}")
    lines.append(f"  {size_comparison_sentence(report, labels)}")

    return "\n".join(lines)
