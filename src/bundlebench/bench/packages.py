"""Installed package size measurement.

Each version is installed with the package manager into a throwaway
directory, and the on-disk size of ``node_modules/<package_name>`` is
recorded. A failed install only loses that version's size.
"""

from __future__ import annotations

import json
import logging
import shutil
import tempfile
from pathlib import Path

from bundlebench.bench.config import BenchConfig
from bundlebench.bench.fs import clean_paths, dir_size
from bundlebench.bench.timing import run_timed
from bundlebench.formatting import format_bytes

log = logging.getLogger("bundlebench")

_STALE_INSTALL_FILES = ("node_modules", "package.json", "package-lock.json")

_SCRATCH_MANIFEST = {
    "name": "package-size-test",
    "version": "1.0.0",
    "dependencies": {},
}


def write_scratch_manifest(workdir: Path) -> Path:
    """Write a ``package.json`` with no dependencies into *workdir*."""
    manifest = workdir / "package.json"
    manifest.write_text(json.dumps(_SCRATCH_MANIFEST), encoding="utf-8")
    return manifest


def measure_package_size(config: BenchConfig, version: str, workdir: Path) -> int | None:
    """Install *version* into *workdir* and return its installed size.

    Returns None if the install command fails.
    """
    clean_paths(workdir, _STALE_INSTALL_FILES)
    write_scratch_manifest(workdir)

    result = run_timed(config.package_install_command(version), cwd=workdir)
    if not result.ok:
        detail = result.error or f"exit code {result.exit_code}"
        log.error(
            "Error measuring package size of %s: %s (%s)",
            version,
            result.command_line,
            detail,
        )
        return None

    size = dir_size(workdir / "node_modules" / config.package_name)
    log.info("Size of %s: %s", version, format_bytes(size))
    return size


def measure_package_sizes(config: BenchConfig) -> dict[str, int]:
    """Measure the installed size of every configured version.

    Uses one temporary directory for all installs, clearing it between
    versions, and removes it afterwards.

    Returns:
        Mapping of version -> size in bytes. Versions whose install
        failed are absent.
    """
    sizes: dict[str, int] = {}
    workdir = Path(tempfile.mkdtemp(prefix="bundlebench-pkgsize-"))
    log.debug("Package size workspace: %s", workdir)
    try:
        for version in config.versions:
            log.info("Measuring size of %s...", version)
            size = measure_package_size(config, version, workdir)
            if size is not None:
                sizes[version] = size
    finally:
        try:
            shutil.rmtree(workdir)
        except OSError as exc:
            log.warning("Error removing temp directory %s: %s", workdir, exc)
    return sizes
