"""
Settings model — every constant the workflows depend on.

The defaults describe the canonical development instance. A
``vaultdev.yml`` in the working directory may override any field.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

DEFAULT_HOSTNAME = "vault.example.com"
DEFAULT_IMAGE = "hashicorp/vault:1.15"

_LABEL = r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
_HOSTNAME_RE = re.compile(rf"^{_LABEL}(?:\.{_LABEL})*$")


class HealthCheck(BaseModel):
    """Compose health check parameters for the Vault service."""

    interval_seconds: int = Field(default=10, ge=1)
    retries: int = Field(default=5, ge=1)

    @property
    def budget_seconds(self) -> int:
        """Total time the container gets to report healthy."""
        return self.interval_seconds * self.retries


class TrustPaths(BaseModel):
    """Anchor directories of the Linux trust-store families."""

    debian_dir: str = "/usr/local/share/ca-certificates"
    rhel_dir: str = "/etc/pki/ca-trust/source/anchors"
    macos_keychain: str = "/Library/Keychains/System.keychain"


class VaultSettings(BaseModel):
    """Root settings of a vaultdev working directory."""

    hostname: str = DEFAULT_HOSTNAME
    loopback: str = "127.0.0.1"

    image: str = DEFAULT_IMAGE
    container_name: str = "vault"
    service_name: str = "vault"
    host_port: int = Field(default=8200, ge=1, le=65535)
    container_port: int = Field(default=8200, ge=1, le=65535)

    cert_days: int = Field(default=365, ge=1)
    key_bits: int = Field(default=2048, ge=2048)

    data_uid: int = Field(default=1000, ge=0)
    data_gid: int = Field(default=1000, ge=0)

    hosts_file: str = "/etc/hosts"
    trust: TrustPaths = Field(default_factory=TrustPaths)
    healthcheck: HealthCheck = Field(default_factory=HealthCheck)

    @field_validator("hostname")
    @classmethod
    def _hostname_is_dns_name(cls, value: str) -> str:
        # Also used as a file name under certs/ and the trust anchor dirs
        value = value.strip()
        if not _HOSTNAME_RE.match(value):
            raise ValueError(f"hostname must be a DNS name (letters, digits, '-', '.'), got {value!r}")
        return value

    @property
    def vault_addr(self) -> str:
        """Address the operator uses from the host."""
        return f"https://{self.hostname}:{self.host_port}"
