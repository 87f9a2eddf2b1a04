"""
Exception hierarchy for vaultdev.

Adapters raise these; step functions in the use cases translate them
into Receipts so the executor can decide whether to continue.
"""

from __future__ import annotations


class VaultDevError(Exception):
    """Base class for all vaultdev errors."""


class ConfigError(VaultDevError):
    """Raised when vaultdev.yml is invalid or unreadable."""


class CertificateError(VaultDevError):
    """Raised when key or certificate generation fails."""


class HostsFileError(VaultDevError):
    """Raised when the hosts file cannot be read or written."""


class TrustStoreError(VaultDevError):
    """Raised when a trust-store command fails."""


class ComposeError(VaultDevError):
    """Raised when a docker compose invocation fails."""
