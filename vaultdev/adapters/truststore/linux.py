"""
Linux trust stores — Debian and RHEL families.

Both copy the certificate into a local anchor directory and run the
distribution's refresh tool; they differ in paths and prerequisites.
"""

from __future__ import annotations

import logging

from vaultdev.adapters.truststore.base import AnchorDirTrustStore

logger = logging.getLogger(__name__)


class DebianTrustStore(AnchorDirTrustStore):
    """Debian/Ubuntu: ``/usr/local/share/ca-certificates`` + ``update-ca-certificates``."""

    refresh_tool = "update-ca-certificates"

    @property
    def name(self) -> str:
        return "debian"

    @property
    def label(self) -> str:
        return "Debian/Ubuntu"


class RhelTrustStore(AnchorDirTrustStore):
    """RHEL/Fedora/CentOS: ``/etc/pki/ca-trust/source/anchors`` + ``update-ca-trust extract``."""

    refresh_tool = "update-ca-trust"
    refresh_args = ("extract",)

    @property
    def name(self) -> str:
        return "rhel"

    @property
    def label(self) -> str:
        return "RHEL/Fedora/CentOS"

    def prepare(self) -> None:
        """Install the ca-certificates package when rpm says it is missing."""
        if self.runner.which("rpm") is None:
            return
        if self.runner.run(["rpm", "-q", "ca-certificates"]).returncode == 0:
            return
        logger.info("ca-certificates not installed — installing with dnf")
        self._check(["dnf", "install", "-y", "ca-certificates"])
