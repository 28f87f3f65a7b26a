"""Tests for bundlebench.cli — Click command-line interface."""

from __future__ import annotations

import json
import logging
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from bench_test_helpers import VERSION_A, VERSION_B, make_report
from click.testing import CliRunner

from bundlebench import __version__
from bundlebench.bench.results import save_results
from bundlebench.bench.runner import BuildError
from bundlebench.bench.timing import TimedResult
from bundlebench.cli import main


class TestHelp(unittest.TestCase):
    def test_group_help(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        self.assertEqual(result.exit_code, 0)
        for command in ("run", "show", "render"):
            self.assertIn(command, result.output)

    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn(__version__, result.output)

    def test_run_help(self) -> None:
        result = CliRunner().invoke(main, ["run", "--help"])
        self.assertEqual(result.exit_code, 0)
        for option in ("--profile", "--version", "--runs", "--entry", "--skip-package-sizes"):
            self.assertIn(option, result.output)


class TestRun(unittest.TestCase):
    def tearDown(self) -> None:
        # run installs console handlers bound to the CliRunner streams.
        logging.getLogger("bundlebench").handlers.clear()

    def test_run_writes_both_reports(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            out = Path(tmpdir) / "out"
            with patch("bundlebench.bench.runner.BenchRunner.run", return_value=make_report()):
                result = CliRunner().invoke(
                    main,
                    ["run", "--project-dir", tmpdir, "--output-dir", str(out), "--runs", "2"],
                )
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertTrue((out / "benchmark-chart.html").exists())
            self.assertIn("faster than", result.output)
            self.assertIn("HTML report", result.output)

    def test_run_passes_options_to_config(self) -> None:
        seen = {}

        def _capture(self: object) -> object:
            seen["config"] = self.config  # type: ignore[attr-defined]
            return make_report()

        with tempfile.TemporaryDirectory() as tmpdir:
            with patch("bundlebench.bench.runner.BenchRunner.run", _capture):
                result = CliRunner().invoke(
                    main,
                    [
                        "run",
                        "--project-dir",
                        tmpdir,
                        "--output-dir",
                        str(Path(tmpdir) / "out"),
                        "--version",
                        "a@1",
                        "--version",
                        "b@2",
                        "--preset",
                        "vue",
                        "--entry",
                        "main.js",
                        "--runs",
                        "3",
                        "--skip-package-sizes",
                    ],
                )
        self.assertEqual(result.exit_code, 0, result.output)
        config = seen["config"]
        self.assertEqual(config.versions, ["a@1", "b@2"])
        self.assertEqual(config.preset, "vue")
        self.assertEqual(config.entry, "main.js")
        self.assertEqual(config.runs, 3)
        self.assertFalse(config.measure_package_sizes)

    def test_profile_values_are_used(self) -> None:
        seen = {}

        def _capture(self: object) -> object:
            seen["config"] = self.config  # type: ignore[attr-defined]
            return make_report()

        with tempfile.TemporaryDirectory() as tmpdir:
            profile = Path(tmpdir) / "bench.yaml"
            profile.write_text(f"runs: 5\npreset: angular\nproject_dir: '{tmpdir}'\n")
            with patch("bundlebench.bench.runner.BenchRunner.run", _capture):
                result = CliRunner().invoke(
                    main,
                    [
                        "run",
                        "--profile",
                        str(profile),
                        "--runs",
                        "2",
                        "--output-dir",
                        str(Path(tmpdir) / "out"),
                    ],
                )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(seen["config"].runs, 2)
        self.assertEqual(seen["config"].preset, "angular")

    def test_build_failure_exits_nonzero(self) -> None:
        failure = BuildError(
            VERSION_A, TimedResult(command=["npx"], wall_time_s=1.0, exit_code=2)
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            with patch("bundlebench.bench.runner.BenchRunner.run", side_effect=failure):
                result = CliRunner().invoke(main, ["run", "--project-dir", tmpdir])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Build with", result.output)

    def test_invalid_config_exits_nonzero(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with patch("bundlebench.bench.runner.run_timed") as mock_run:
                result = CliRunner().invoke(
                    main, ["run", "--project-dir", tmpdir, "--version", "only@1"]
                )
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Exactly two versions", result.output)
        mock_run.assert_not_called()


class TestShowAndRender(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.results = self.root / "benchmark-results.json"
        save_results(self.results, make_report())

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_show(self) -> None:
        result = CliRunner().invoke(main, ["show", str(self.results)])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn(f"{VERSION_B} is 20.00% faster than {VERSION_A}", result.output)

    def test_show_with_profile_labels(self) -> None:
        profile = self.root / "bench.yaml"
        profile.write_text(f"labels:\n  '{VERSION_A}': 'v5'\n  '{VERSION_B}': 'v4'\n")
        result = CliRunner().invoke(main, ["show", str(self.results), "--profile", str(profile)])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("v4 is 20.00% faster than v5", result.output)

    def test_show_bad_file(self) -> None:
        bad = self.root / "bad.json"
        bad.write_text("not json")
        result = CliRunner().invoke(main, ["show", str(bad)])
        self.assertEqual(result.exit_code, 1)

    def test_render_default_output(self) -> None:
        result = CliRunner().invoke(main, ["render", str(self.results)])
        self.assertEqual(result.exit_code, 0, result.output)
        page = (self.root / "benchmark-chart.html").read_text()
        self.assertIn(json.dumps(make_report().to_dict()), page)

    def test_render_custom_output(self) -> None:
        target = self.root / "custom.html"
        result = CliRunner().invoke(main, ["render", str(self.results), "-o", str(target)])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertTrue(target.exists())
