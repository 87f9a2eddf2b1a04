"""
Mock runner — universal test double for external commands.

Records every command it receives and answers with configurable
results, so workflows can be exercised without docker, trust-store
tools or a package manager on the machine.
"""

from __future__ import annotations

import subprocess
from pathlib import Path


class MockRunner:
    """Drop-in replacement for ``CommandRunner``.

    By default every command succeeds with empty output. Responses are
    matched on the longest configured argument prefix, so
    ``set_response(["docker", "compose"], ...)`` covers every compose
    subcommand unless a more specific prefix is also configured.
    """

    def __init__(self, available: set[str] | None = None):
        self._available = set(available or ())
        self._responses: dict[tuple[str, ...], tuple[int, str, str]] = {}
        self._call_log: list[list[str]] = []

    @property
    def call_log(self) -> list[list[str]]:
        """All commands this mock has received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def calls_starting_with(self, *prefix: str) -> list[list[str]]:
        return [c for c in self._call_log if tuple(c[: len(prefix)]) == prefix]

    def make_available(self, *names: str) -> None:
        self._available.update(names)

    def which(self, name: str) -> str | None:
        return f"/usr/bin/{name}" if name in self._available else None

    def set_response(
        self,
        prefix: list[str],
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        """Set a canned result for commands starting with ``prefix``."""
        self._responses[tuple(prefix)] = (returncode, stdout, stderr)

    def set_failure(self, prefix: list[str], stderr: str = "Mock failure", returncode: int = 1) -> None:
        self.set_response(prefix, returncode=returncode, stderr=stderr)

    def run(
        self,
        args: list[str],
        *,
        cwd: Path | None = None,
        timeout: int = 0,
    ) -> subprocess.CompletedProcess[str]:
        self._call_log.append(list(args))

        best: tuple[str, ...] | None = None
        for prefix in self._responses:
            if tuple(args[: len(prefix)]) == prefix and (best is None or len(prefix) > len(best)):
                best = prefix

        if best is None:
            return subprocess.CompletedProcess(args, 0, "", "")
        code, out, err = self._responses[best]
        return subprocess.CompletedProcess(args, code, out, err)

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()
