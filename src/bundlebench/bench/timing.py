"""Wall-clock timing of subprocess executions.

Commands run with the parent's standard streams so their progress is
visible live, and block until they exit. There is no timeout: a hung
subprocess hangs the benchmark.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger("bundlebench")

# Exit code reported when the executable cannot be started, as a shell would.
EXIT_NOT_FOUND = 127


@dataclass
class TimedResult:
    """Result of a timed subprocess execution."""

    command: list[str]
    wall_time_s: float
    exit_code: int
    error: str = ""  # set when the process could not be started

    @property
    def ok(self) -> bool:
        """True if the command ran and exited with status 0."""
        return self.exit_code == 0

    @property
    def command_line(self) -> str:
        """The command as a shell-quoted string, for messages."""
        return shlex.join(self.command)


def run_timed(
    command: list[str],
    *,
    cwd: str | Path | None = None,
    env: dict[str, str] | None = None,
) -> TimedResult:
    """Execute *command* and measure its wall-clock duration.

    Args:
        command: Argument list; no shell is involved.
        cwd: Working directory for the subprocess. The current process
            directory is never changed.
        env: Extra environment variables layered over ``os.environ``.

    Returns:
        TimedResult with the elapsed seconds and exit code. A missing or
        non-executable program yields exit code 127 and *error* set.
    """
    run_env = None
    if env:
        run_env = dict(os.environ)
        run_env.update(env)

    log.debug("Running %s (cwd=%s)", shlex.join(command), cwd or os.getcwd())
    wall_start = time.monotonic()
    try:
        proc = subprocess.run(
            command,
            cwd=str(cwd) if cwd else None,
            env=run_env,
            check=False,
        )
    except OSError as exc:
        return TimedResult(
            command=list(command),
            wall_time_s=time.monotonic() - wall_start,
            exit_code=EXIT_NOT_FOUND,
            error=str(exc),
        )
    wall_time = time.monotonic() - wall_start

    return TimedResult(
        command=list(command),
        wall_time_s=max(wall_time, 0.0),
        exit_code=proc.returncode,
    )
