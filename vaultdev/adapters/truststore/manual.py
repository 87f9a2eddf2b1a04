"""
Manual trust stores — platforms where vaultdev only gives instructions.

macOS keychain changes are left to the operator; anything unrecognised
gets a generic note. Neither variant touches the filesystem.
"""

from __future__ import annotations

import platform
from pathlib import Path

from vaultdev.adapters.shell.command import CommandRunner
from vaultdev.adapters.truststore.base import TrustStore


class DarwinTrustStore(TrustStore):
    """macOS: print the ``security`` commands instead of running them."""

    automatic = False

    def __init__(self, runner: CommandRunner, hostname: str, keychain: str, system: str | None = None):
        super().__init__(runner, hostname)
        self.keychain = keychain
        self._system = system

    @property
    def name(self) -> str:
        return "darwin"

    @property
    def label(self) -> str:
        return "macOS"

    def is_available(self) -> bool:
        return (self._system or platform.system()) == "Darwin"

    def contains(self) -> bool:
        # Read-only query, safe to run without privileges.
        result = self.runner.run(["security", "find-certificate", "-c", self.hostname, self.keychain])
        return result.returncode == 0

    def manual_instructions(self, cert_file: Path) -> list[str]:
        return [
            f"sudo security add-trusted-cert -d -r trustRoot -k {self.keychain} {cert_file}",
        ]

    def removal_instructions(self) -> list[str]:
        return [
            f"sudo security delete-certificate -c {self.hostname} {self.keychain}",
        ]

    def add(self, cert_file: Path) -> str:
        return "Automatic keychain changes are not performed on macOS"

    def remove(self) -> str | None:
        return None


class UnsupportedTrustStore(TrustStore):
    """Fallback for any platform without a known trust mechanism."""

    automatic = False

    def __init__(self, runner: CommandRunner, hostname: str, system: str | None = None):
        super().__init__(runner, hostname)
        self.system = system or platform.system() or "unknown"

    @property
    def name(self) -> str:
        return "unsupported"

    @property
    def label(self) -> str:
        return f"unsupported ({self.system})"

    def is_available(self) -> bool:
        return True

    def contains(self) -> bool:
        return False

    def manual_instructions(self, cert_file: Path) -> list[str]:
        return [f"Trust {cert_file} manually using your OS certificate tooling"]

    def add(self, cert_file: Path) -> str:
        return f"Certificate trust is not automated for {self.system}"

    def remove(self) -> str | None:
        return None
