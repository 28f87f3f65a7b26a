"""Shared text formatting helpers for bundlebench.

Provides functions for formatting byte counts, durations, percentages,
tables and section headers used by the console summary and the CLI.
"""

from __future__ import annotations

import math

_BYTE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


def _strip_zeros(text: str) -> str:
    """Drop trailing zeros (and a dangling point) from a fixed-point string."""
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_bytes(num_bytes: float | None, decimals: int = 2) -> str:
    """Format a byte count with base-1024 units.

    Examples: ``'0 Bytes'``, ``'1.5 KB'``, ``'1 GB'``. The unit is picked
    from the magnitude, so negative values keep their sign:
    ``format_bytes(-2048) == '-2 KB'``.

    Args:
        num_bytes: The byte count. ``0`` and ``None`` give ``'0 Bytes'``.
        decimals: Maximum number of decimal places (negative means 0).
    """
    if not num_bytes:
        return "0 Bytes"

    dm = max(decimals, 0)
    magnitude = abs(num_bytes)
    i = int(math.floor(math.log(magnitude) / math.log(1024)))
    # Correct float error at exact powers of 1024.
    if 1024 ** (i + 1) <= magnitude:
        i += 1
    elif 1024**i > magnitude:
        i -= 1
    i = max(0, min(i, len(_BYTE_UNITS) - 1))
    value = num_bytes / 1024**i
    return f"{_strip_zeros(f'{value:.{dm}f}')} {_BYTE_UNITS[i]}"


def format_seconds(seconds: float, precision: int = 2) -> str:
    """Format a duration in seconds: ``'12.34s'``. ``'N/A'`` for NaN."""
    if math.isnan(seconds):
        return "N/A"
    return f"{seconds:.{precision}f}s"


def format_pct(value: float | None, precision: int = 2) -> str:
    """Format a percentage with sign: ``'+4.20%'``. ``'N/A'`` if unknown."""
    if value is None or math.isnan(value):
        return "N/A"
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.{precision}f}%"


def format_table(
    headers: list[str],
    rows: list[list[str]],
    *,
    alignments: list[str] | None = None,
    indent: int = 2,
) -> str:
    """Format a list of rows as an aligned text table.

    Auto-calculates column widths from content. Right-aligns columns
    marked ``'r'`` in *alignments*.
    """
    if not headers:
        return ""

    ncols = len(headers)
    aligns = list(alignments or [])
    while len(aligns) < ncols:
        aligns.append("l")

    proc_rows: list[list[str]] = []
    for row in rows:
        padded = list(row) + [""] * (ncols - len(row))
        proc_rows.append(padded[:ncols])

    widths = [len(h) for h in headers]
    for row in proc_rows:
        for ci, cell in enumerate(row):
            widths[ci] = max(widths[ci], len(cell))

    def _format_row(cells: list[str]) -> str:
        parts = []
        for ci, cell in enumerate(cells):
            if aligns[ci] == "r":
                parts.append(cell.rjust(widths[ci]))
            else:
                parts.append(cell.ljust(widths[ci]))
        return (" " * indent + "  ".join(parts)).rstrip()

    lines = [_format_row(list(headers))]
    lines.extend(_format_row(row) for row in proc_rows)
    return "\n".join(lines)


def format_section_header(title: str, width: int = 72) -> str:
    """Format a section header: ``'─── Title ──...'``."""
    prefix = "─── "
    suffix_len = width - len(prefix) - len(title) - 1
    suffix = " " + "─" * max(0, suffix_len)
    return prefix + title + suffix
