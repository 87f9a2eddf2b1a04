"""
Trust-store adapter base — the contract every OS family implements.

The trust mechanism is OS-specific and cannot be unified. The workflows
only see this interface; ``select_trust_store`` picks the variant once
per run.
"""

from __future__ import annotations

import shutil
from abc import ABC, abstractmethod
from pathlib import Path

from vaultdev.adapters.shell.command import CommandRunner, describe_failure
from vaultdev.core.errors import TrustStoreError


class TrustStore(ABC):
    """Register a certificate with the machine-wide trusted roots.

    ``add`` and ``remove`` return a short description of what happened
    and raise ``TrustStoreError`` when a command fails. ``automatic`` is
    False for variants that only print instructions.
    """

    automatic: bool = True

    def __init__(self, runner: CommandRunner, hostname: str):
        self.runner = runner
        self.hostname = hostname

    @property
    @abstractmethod
    def name(self) -> str:
        """Variant identifier ('debian', 'rhel', 'darwin', 'unsupported')."""

    @property
    def label(self) -> str:
        return self.name

    @abstractmethod
    def is_available(self) -> bool:
        """Whether this variant applies to the current machine."""

    @abstractmethod
    def contains(self) -> bool:
        """Whether the certificate is currently registered."""

    @abstractmethod
    def add(self, cert_file: Path) -> str:
        """Trust ``cert_file``."""

    @abstractmethod
    def remove(self) -> str | None:
        """Stop trusting the certificate. None when nothing was registered."""

    def manual_instructions(self, cert_file: Path) -> list[str]:
        """Commands the operator must run when ``automatic`` is False."""
        return []

    def _check(self, args: list[str]) -> None:
        result = self.runner.run(args)
        if result.returncode != 0:
            raise TrustStoreError(describe_failure(result))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class AnchorDirTrustStore(TrustStore):
    """Linux families: copy into an anchor directory, then refresh."""

    refresh_tool: str = ""
    refresh_args: tuple[str, ...] = ()

    def __init__(self, runner: CommandRunner, hostname: str, anchor_dir: Path):
        super().__init__(runner, hostname)
        self.anchor_dir = Path(anchor_dir)

    @property
    def anchor_file(self) -> Path:
        return self.anchor_dir / f"{self.hostname}.crt"

    def is_available(self) -> bool:
        return self.runner.which(self.refresh_tool) is not None

    def contains(self) -> bool:
        return self.anchor_file.is_file()

    def refresh(self) -> None:
        self._check([self.refresh_tool, *self.refresh_args])

    def prepare(self) -> None:
        """Hook for variant-specific prerequisites before copying."""

    def add(self, cert_file: Path) -> str:
        self.prepare()
        try:
            self.anchor_dir.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(cert_file, self.anchor_file)
        except OSError as e:
            raise TrustStoreError(f"Cannot copy certificate to {self.anchor_file}: {e}") from e
        self.refresh()
        return f"Certificate copied to {self.anchor_file} and trust store refreshed"

    def remove(self) -> str | None:
        if not self.anchor_file.is_file():
            return None
        try:
            self.anchor_file.unlink()
        except OSError as e:
            raise TrustStoreError(f"Cannot remove {self.anchor_file}: {e}") from e
        self.refresh()
        return f"Removed {self.anchor_file} and refreshed trust store"
