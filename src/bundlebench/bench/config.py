"""Benchmark configuration and profile loading.

Handles:
- The resolved configuration dataclass with the default versions,
  preset and repetition count.
- Loading benchmark profiles from YAML files.
- Merging CLI options over profile values.
- Validating the final configuration before any subprocess runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from bundlebench.bench.results import RESERVED_KEYS

log = logging.getLogger("bundlebench")

DEFAULT_VERSIONS = ["edge-functions@5.0.0-stage.1", "edge-functions@latest"]
DEFAULT_CLEAN_TARGETS = [
    ".edge",
    "dist",
    ".vercel",
    ".next",
    "azion.config.js",
    "azion.config.cjs",
    "azion.config.mjs",
    "azion.config.ts",
]

RESULTS_FILENAME = "benchmark-results.json"
HTML_FILENAME = "benchmark-chart.html"


# ---------------------------------------------------------------------------
# BenchConfig
# ---------------------------------------------------------------------------


@dataclass
class BenchConfig:
    """Resolved configuration for a benchmark run."""

    # Versions under test, in comparison order (second is compared to first)
    versions: list[str] = field(default_factory=lambda: list(DEFAULT_VERSIONS))
    package_name: str = "edge-functions"  # directory under node_modules/

    # Build invocation
    preset: str = "next"
    entry: str | None = None
    runs: int = 8
    runner_command: list[str] = field(default_factory=lambda: ["npx", "--yes"])
    install_command: list[str] = field(default_factory=lambda: ["npm", "install"])

    # Workspace
    project_dir: Path = field(default_factory=lambda: Path("."))
    output_dir: Path = field(default_factory=lambda: Path("benchmark"))
    output_dirs: list[str] = field(default_factory=lambda: [".edge", "dist"])
    clean_targets: list[str] = field(default_factory=lambda: list(DEFAULT_CLEAN_TARGETS))
    measure_package_sizes: bool = True

    # Report presentation
    title: str = "Azion Bundler Benchmark"
    subtitle: str = ""
    labels: dict[str, str] = field(default_factory=dict)

    @property
    def results_path(self) -> Path:
        """Where the JSON results are written."""
        return self.output_dir / RESULTS_FILENAME

    @property
    def html_path(self) -> Path:
        """Where the HTML chart report is written."""
        return self.output_dir / HTML_FILENAME

    def label_for(self, version: str) -> str:
        """Display label for *version*, defaulting to the identifier itself."""
        return self.labels.get(version) or version

    def build_command(self, version: str) -> list[str]:
        """Argument list that builds the project with *version*."""
        cmd = [*self.runner_command, version, "build", "--preset", self.preset]
        if self.entry:
            cmd += ["--entry", self.entry]
        return cmd

    def package_install_command(self, version: str) -> list[str]:
        """Argument list that installs *version* without touching package.json."""
        return [*self.install_command, version, "--no-save"]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def validate_config(config: BenchConfig) -> list[ValidationError]:
    """Validate a benchmark configuration.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []

    if len(config.versions) != 2:
        errors.append(
            ValidationError(
                field="versions",
                message=f"Exactly two versions must be compared (got {len(config.versions)}).",
            )
        )
    elif config.versions[0] == config.versions[1]:
        errors.append(
            ValidationError(
                field="versions",
                message=f"The two versions must differ (both are '{config.versions[0]}').",
            )
        )

    for version in config.versions:
        if not version or not version.strip():
            errors.append(
                ValidationError(field="versions", message="Version identifiers must be non-empty.")
            )
        elif version in RESERVED_KEYS:
            errors.append(
                ValidationError(
                    field="versions",
                    message=f"'{version}' is reserved in the results file.",
                )
            )

    if config.runs < 1:
        errors.append(
            ValidationError(
                field="runs",
                message=f"Need at least one run per version (got {config.runs}).",
            )
        )
    elif config.runs < 3:
        errors.append(
            ValidationError(
                field="runs",
                message=f"Only {config.runs} run(s) per version; statistics will be noisy.",
                severity="warning",
            )
        )

    if not config.preset:
        errors.append(ValidationError(field="preset", message="A build preset is required."))

    if not config.package_name:
        errors.append(
            ValidationError(field="package_name", message="A package name is required.")
        )

    if not config.project_dir.is_dir():
        errors.append(
            ValidationError(
                field="project_dir",
                message=f"Project directory does not exist: {config.project_dir}",
            )
        )

    if not config.runner_command:
        errors.append(
            ValidationError(field="runner_command", message="Runner command cannot be empty.")
        )

    if config.measure_package_sizes and not config.install_command:
        errors.append(
            ValidationError(field="install_command", message="Install command cannot be empty.")
        )

    return errors


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load a benchmark profile from a YAML file.

    Profile format::

        versions:
          - "edge-functions@5.0.0-stage.1"
          - "edge-functions@latest"
        package_name: edge-functions
        preset: next
        entry: null
        runs: 8
        project_dir: ./my-app
        output_dir: ./benchmark
        title: "Azion Bundler Benchmark"
        subtitle: "Next.js App Router"
        labels:
          "edge-functions@5.0.0-stage.1": "edge-functions@5.0"
          "edge-functions@latest": "edge-functions@4.x"

    Returns:
        The parsed YAML as a dict.
    """
    import yaml

    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    data = yaml.safe_load(profile_path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Profile must be a YAML mapping, got {type(data).__name__}")
    return data


def _str_list(value: Any, name: str) -> list[str]:
    if isinstance(value, str):
        return value.split()
    if not isinstance(value, list):
        raise ValueError(f"Profile '{name}' must be a list, got {type(value).__name__}")
    return [str(v) for v in value]


def config_from_profile(
    profile_data: dict[str, Any],
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> BenchConfig:
    """Build a BenchConfig from a parsed profile and CLI overrides.

    CLI overrides take precedence over profile values; ``None`` values
    and empty sequences in *cli_overrides* mean "not given".

    Args:
        profile_data: Parsed YAML profile dict (may be empty).
        cli_overrides: Dict of CLI option values keyed by BenchConfig
            field name.

    Returns:
        The merged BenchConfig.
    """
    merged: dict[str, Any] = dict(profile_data)
    for key, value in (cli_overrides or {}).items():
        if value is None or value == () or value == []:
            continue
        merged[key] = value

    config = BenchConfig()

    if "versions" in merged:
        config.versions = _str_list(merged["versions"], "versions")
    if "package_name" in merged:
        config.package_name = str(merged["package_name"])
    if "preset" in merged:
        config.preset = str(merged["preset"])
    if merged.get("entry"):
        config.entry = str(merged["entry"])
    if "runs" in merged:
        config.runs = int(merged["runs"])
    if "runner_command" in merged:
        config.runner_command = _str_list(merged["runner_command"], "runner_command")
    if "install_command" in merged:
        config.install_command = _str_list(merged["install_command"], "install_command")
    if "project_dir" in merged:
        config.project_dir = Path(merged["project_dir"])
    if "output_dir" in merged:
        config.output_dir = Path(merged["output_dir"])
    if "output_dirs" in merged:
        config.output_dirs = _str_list(merged["output_dirs"], "output_dirs")
    if "clean_targets" in merged:
        config.clean_targets = _str_list(merged["clean_targets"], "clean_targets")
    if "measure_package_sizes" in merged:
        config.measure_package_sizes = bool(merged["measure_package_sizes"])
    if "title" in merged:
        config.title = str(merged["title"])
    if "subtitle" in merged:
        config.subtitle = str(merged["subtitle"] or "")

    labels = merged.get("labels") or {}
    if not isinstance(labels, dict):
        raise ValueError("Profile 'labels' must be a mapping of version -> label")
    config.labels = {str(k): str(v) for k, v in labels.items()}

    log.debug("Resolved config: %s", config)
    return config
