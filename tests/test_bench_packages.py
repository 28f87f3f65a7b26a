"""Tests for bundlebench.bench.packages — installed package size measurement."""

from __future__ import annotations

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from bench_test_helpers import VERSION_A, VERSION_B, make_config

from bundlebench.bench.packages import (
    measure_package_size,
    measure_package_sizes,
    write_scratch_manifest,
)
from bundlebench.bench.timing import TimedResult

_SIZES = {VERSION_A: 1200, VERSION_B: 3400}


def _fake_install(command: list[str], *, cwd: Path, **kwargs: object) -> TimedResult:
    """Pretend to be ``npm install``: populate node_modules in *cwd*."""
    version = command[2]
    manifest = json.loads((Path(cwd) / "package.json").read_text())
    assert manifest["dependencies"] == {}
    pkg_dir = Path(cwd) / "node_modules" / "edge-functions"
    pkg_dir.mkdir(parents=True, exist_ok=True)
    (pkg_dir / "index.js").write_bytes(b"x" * _SIZES[version])
    return TimedResult(command=command, wall_time_s=0.1, exit_code=0)


class TestScratchManifest(unittest.TestCase):
    def test_manifest_has_no_dependencies(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_scratch_manifest(Path(tmpdir))
            data = json.loads(path.read_text())
            self.assertEqual(data["name"], "package-size-test")
            self.assertEqual(data["dependencies"], {})


class TestMeasurePackageSize(unittest.TestCase):
    def test_previous_install_is_cleared(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            workdir = Path(tmpdir)
            stale = workdir / "node_modules" / "edge-functions" / "stale.bin"
            stale.parent.mkdir(parents=True)
            stale.write_bytes(b"x" * 10_000)
            (workdir / "package-lock.json").write_text("{}")
            config = make_config(tmpdir)

            with patch("bundlebench.bench.packages.run_timed", side_effect=_fake_install):
                size = measure_package_size(config, VERSION_A, workdir)

            self.assertEqual(size, _SIZES[VERSION_A])
            self.assertFalse(stale.exists())
            self.assertFalse((workdir / "package-lock.json").exists())

    def test_install_failure_returns_none(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = make_config(tmpdir)
            failed = TimedResult(command=["npm"], wall_time_s=0.1, exit_code=1)
            with patch("bundlebench.bench.packages.run_timed", return_value=failed):
                with self.assertLogs("bundlebench", level="ERROR"):
                    size = measure_package_size(config, VERSION_A, Path(tmpdir))
            self.assertIsNone(size)


class TestMeasurePackageSizes(unittest.TestCase):
    def test_all_versions_measured(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = make_config(tmpdir)
            with patch(
                "bundlebench.bench.packages.run_timed", side_effect=_fake_install
            ) as mock_run:
                sizes = measure_package_sizes(config)

            self.assertEqual(sizes, _SIZES)
            self.assertEqual(mock_run.call_count, 2)
            first_cmd = mock_run.call_args_list[0].args[0]
            self.assertEqual(first_cmd, ["npm", "install", VERSION_A, "--no-save"])

    def test_uses_temp_dir_and_removes_it(self) -> None:
        seen_cwds: list[Path] = []

        def _record(command: list[str], *, cwd: Path, **kwargs: object) -> TimedResult:
            seen_cwds.append(Path(cwd))
            return _fake_install(command, cwd=cwd)

        before = os.getcwd()
        with tempfile.TemporaryDirectory() as tmpdir:
            with patch("bundlebench.bench.packages.run_timed", side_effect=_record):
                measure_package_sizes(make_config(tmpdir))

        self.assertEqual(len(set(seen_cwds)), 1)
        self.assertFalse(seen_cwds[0].exists())
        self.assertEqual(os.getcwd(), before)

    def test_failed_version_is_left_out(self) -> None:
        def _fail_first(command: list[str], *, cwd: Path, **kwargs: object) -> TimedResult:
            if command[2] == VERSION_A:
                return TimedResult(command=command, wall_time_s=0.0, exit_code=127, error="nope")
            return _fake_install(command, cwd=cwd)

        with tempfile.TemporaryDirectory() as tmpdir:
            with patch("bundlebench.bench.packages.run_timed", side_effect=_fail_first):
                with self.assertLogs("bundlebench", level="ERROR"):
                    sizes = measure_package_sizes(make_config(tmpdir))

        self.assertEqual(sizes, {VERSION_B: _SIZES[VERSION_B]})

    def test_cleanup_failure_is_logged(self) -> None:
        real_rmtree = shutil.rmtree
        leaked: list[Path] = []

        def _flaky_rmtree(path: str | Path, *args: object, **kwargs: object) -> None:
            if Path(path).name.startswith("bundlebench-pkgsize-"):
                leaked.append(Path(path))
                raise OSError("busy")
            real_rmtree(path, *args, **kwargs)  # type: ignore[arg-type]

        with tempfile.TemporaryDirectory() as tmpdir:
            with (
                patch("bundlebench.bench.packages.run_timed", side_effect=_fake_install),
                patch("shutil.rmtree", side_effect=_flaky_rmtree),
            ):
                with self.assertLogs("bundlebench", level="WARNING") as logs:
                    sizes = measure_package_sizes(make_config(tmpdir))

        for path in leaked:
            real_rmtree(path, ignore_errors=True)
        self.assertEqual(sizes, _SIZES)
        self.assertEqual(len(leaked), 1)
        self.assertTrue(any("busy" in line for line in logs.output))
