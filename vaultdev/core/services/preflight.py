"""
Preflight checks — verify the machine before anything is mutated.

Each check returns a ``PreflightCheck``; ``severity`` decides how the
workflow treats a failed check:

    fatal    missing privileges, missing compose support
    warning  missing companion ``vault`` CLI
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from vaultdev.adapters.registry import AdapterRegistry

logger = logging.getLogger(__name__)

Severity = Literal["fatal", "warning"]


@dataclass
class PreflightCheck:
    name: str
    passed: bool
    severity: Severity
    message: str

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "passed": self.passed,
            "severity": self.severity,
            "message": self.message,
        }


@dataclass
class PreflightReport:
    checks: list[PreflightCheck] = field(default_factory=list)

    @property
    def fatal_failures(self) -> list[PreflightCheck]:
        return [c for c in self.checks if not c.passed and c.severity == "fatal"]

    @property
    def warnings(self) -> list[PreflightCheck]:
        return [c for c in self.checks if not c.passed and c.severity == "warning"]

    @property
    def ok(self) -> bool:
        return not self.fatal_failures


def check_privileges(registry: AdapterRegistry) -> PreflightCheck:
    if registry.is_privileged():
        return PreflightCheck("privileges", True, "fatal", "Running with elevated privileges")
    return PreflightCheck(
        "privileges",
        False,
        "fatal",
        f"Elevated privileges are required to edit {registry.hosts.path} "
        "and the system trust store. Re-run with sudo.",
    )


def check_compose(registry: AdapterRegistry) -> PreflightCheck:
    if not registry.compose.docker_available():
        return PreflightCheck("compose", False, "fatal", "docker CLI not found on PATH")
    version = registry.compose.compose_version()
    if version is None:
        return PreflightCheck(
            "compose",
            False,
            "fatal",
            "'docker compose' is not supported by this docker installation",
        )
    return PreflightCheck("compose", True, "fatal", f"docker compose {version}")


def check_vault_cli(registry: AdapterRegistry) -> PreflightCheck:
    if registry.runner.which("vault") is not None:
        return PreflightCheck("vault-cli", True, "warning", "vault CLI found")
    return PreflightCheck(
        "vault-cli",
        False,
        "warning",
        "vault CLI not found — install it to run 'vault operator init' after setup",
    )


def run_preflight(registry: AdapterRegistry, require_compose: bool = True) -> PreflightReport:
    """Run every applicable check, in order."""
    report = PreflightReport()
    report.checks.append(check_privileges(registry))
    if require_compose:
        report.checks.append(check_compose(registry))
        report.checks.append(check_vault_cli(registry))

    for check in report.checks:
        level = logging.DEBUG if check.passed else logging.WARNING
        logger.log(level, "preflight %s: %s", check.name, check.message)
    return report
