"""
Compose controller — thin wrapper over ``docker compose``.

Lifecycle is fully delegated to compose: ``up -d`` to apply the
generated declaration, ``down --remove-orphans`` to tear it down.
Uses the docker CLI, never the Docker API directly.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable

from vaultdev.adapters.shell.command import CommandRunner, describe_failure
from vaultdev.core.errors import ComposeError
from vaultdev.core.models.layout import ProjectLayout

logger = logging.getLogger(__name__)


class ComposeController:
    """Compose operations for the single Vault service.

    Every invocation passes ``-f`` (and ``--env-file`` while ``.env``
    exists) explicitly so the generated files are used regardless of the
    caller's cwd.
    """

    def __init__(self, runner: CommandRunner, layout: ProjectLayout, container_name: str = "vault"):
        self.runner = runner
        self.layout = layout
        self.container_name = container_name

    # ── Probes ──────────────────────────────────────────────────

    def docker_available(self) -> bool:
        return self.runner.which("docker") is not None

    def compose_version(self) -> str | None:
        """``docker compose version`` output, or None when unsupported."""
        if not self.docker_available():
            return None
        result = self.runner.run(["docker", "compose", "version", "--short"], timeout=30)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or "unknown"

    def has_declaration(self) -> bool:
        return self.layout.compose_file.is_file()

    # ── Lifecycle ───────────────────────────────────────────────

    def up(self) -> str:
        return self._compose(["up", "-d"], timeout=600)

    def down(self) -> str:
        return self._compose(["down", "--remove-orphans"], timeout=300)

    def ps(self) -> list[dict]:
        """Service states from ``docker compose ps --format json``."""
        output = self._compose(["ps", "--all", "--format", "json"], timeout=30)
        return _parse_ps(output)

    def health(self) -> str | None:
        """Container health status ('starting', 'healthy', ...) or None."""
        result = self.runner.run(
            ["docker", "inspect", "--format", "{{.State.Health.Status}}", self.container_name],
            timeout=30,
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def wait_healthy(
        self,
        timeout_seconds: int,
        poll_seconds: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> str | None:
        """Poll until healthy or the budget runs out. Returns the last status."""
        deadline = clock() + timeout_seconds
        status = self.health()
        while status != "healthy" and clock() < deadline:
            if status == "unhealthy":
                break
            sleep(poll_seconds)
            status = self.health()
        logger.debug("Container %s health: %s", self.container_name, status)
        return status

    # ── Helpers ─────────────────────────────────────────────────

    def _compose(self, args: list[str], timeout: int = 120) -> str:
        cmd = ["docker", "compose"]
        # compose refuses a missing --env-file; the declaration has defaults
        if self.layout.env_file.is_file():
            cmd += ["--env-file", str(self.layout.env_file)]
        cmd += ["-f", str(self.layout.compose_file), *args]
        result = self.runner.run(cmd, cwd=self.layout.root, timeout=timeout)
        if result.returncode != 0:
            raise ComposeError(describe_failure(result))
        return result.stdout.strip()


def _parse_ps(output: str) -> list[dict]:
    """Compose prints either a JSON array or one JSON object per line."""
    output = output.strip()
    if not output:
        return []
    if output.startswith("["):
        data = json.loads(output)
        return data if isinstance(data, list) else []
    services = []
    for line in output.splitlines():
        line = line.strip()
        if line:
            services.append(json.loads(line))
    return services
