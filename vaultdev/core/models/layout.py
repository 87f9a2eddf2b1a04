"""
Project layout — the files and directories a provisioning run creates.

Every path is derived from the working directory and the hostname.
Existence is binary per path: teardown deletes all of them.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

CERTS_DIR = "certs"
VAULT_DIR = "vault"
DATA_DIR = "vault-data"
CERT_CONF_FILE = "vault-cert.conf"
SERVER_CONF_FILE = "vault.hcl"
ENV_FILE = ".env"
COMPOSE_FILE = "docker-compose.yml"


@dataclass(frozen=True)
class ProjectLayout:
    """Resolved paths of a vaultdev working directory."""

    root: Path
    hostname: str

    @classmethod
    def for_root(cls, root: Path, hostname: str) -> ProjectLayout:
        return cls(root=Path(root).resolve(), hostname=hostname)

    # ── Directories ─────────────────────────────────────────────

    @property
    def certs_dir(self) -> Path:
        return self.root / CERTS_DIR

    @property
    def vault_dir(self) -> Path:
        return self.root / VAULT_DIR

    @property
    def data_dir(self) -> Path:
        return self.root / DATA_DIR

    # ── Files ───────────────────────────────────────────────────

    @property
    def cert_conf(self) -> Path:
        return self.root / CERT_CONF_FILE

    @property
    def server_conf(self) -> Path:
        return self.vault_dir / SERVER_CONF_FILE

    @property
    def env_file(self) -> Path:
        return self.root / ENV_FILE

    @property
    def compose_file(self) -> Path:
        return self.root / COMPOSE_FILE

    @property
    def key_file(self) -> Path:
        return self.certs_dir / f"{self.hostname}.key"

    @property
    def cert_file(self) -> Path:
        return self.certs_dir / f"{self.hostname}.crt"

    # ── Inventory ───────────────────────────────────────────────

    def directories(self) -> list[Path]:
        return [self.certs_dir, self.vault_dir, self.data_dir]

    def top_level_files(self) -> list[Path]:
        """Generated files that live directly in the working directory."""
        return [self.cert_conf, self.env_file, self.compose_file]

    def generated_paths(self) -> list[Path]:
        """Everything teardown removes, excluding editor backups."""
        return [*self.directories(), *self.top_level_files()]

    def backup_paths(self) -> list[Path]:
        """Editor leftovers next to the top-level generated files."""
        backups: list[Path] = []
        for path in self.top_level_files():
            backups.append(path.with_name(path.name + "~"))
            backups.append(path.with_name(f".{path.name}.swp"))
        return backups

    def existing_paths(self) -> list[Path]:
        return [p for p in self.generated_paths() if p.exists()]
