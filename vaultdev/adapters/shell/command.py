"""
Command runner — the single place vaultdev spawns external processes.

Every external tool (docker, trust-store refresh commands, rpm/dnf)
goes through a ``CommandRunner``. Tests swap in ``MockRunner`` from
``vaultdev.adapters.mock`` so no real process is ever started.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120


class CommandRunner:
    """Run commands with captured text output.

    ``run`` never raises for a non-zero exit: callers inspect
    ``returncode``. A missing executable or a timeout is reported as a
    synthetic result with return code 127 or 124, matching shell
    conventions.
    """

    def which(self, name: str) -> str | None:
        """Locate an executable on PATH."""
        return shutil.which(name)

    def run(
        self,
        args: list[str],
        *,
        cwd: Path | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> subprocess.CompletedProcess[str]:
        logger.debug("Running: %s (cwd=%s)", " ".join(args), cwd)
        try:
            return subprocess.run(
                args,
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except FileNotFoundError:
            return subprocess.CompletedProcess(args, 127, "", f"{args[0]}: command not found")
        except subprocess.TimeoutExpired:
            return subprocess.CompletedProcess(args, 124, "", f"Command timed out after {timeout}s")


def describe_failure(result: subprocess.CompletedProcess[str]) -> str:
    """Best one-line explanation of a failed command."""
    detail = (result.stderr or "").strip() or (result.stdout or "").strip()
    cmd = " ".join(result.args) if isinstance(result.args, list) else str(result.args)
    if detail:
        return f"{cmd}: {detail.splitlines()[-1]}"
    return f"{cmd} exited with code {result.returncode}"
