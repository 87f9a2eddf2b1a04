"""
Trust-store selection — probe once, dispatch to one variant.

Order matters: a Linux host with ``update-ca-certificates`` is Debian
family even if ``update-ca-trust`` is also installed.
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path

from vaultdev.adapters.shell.command import CommandRunner
from vaultdev.adapters.truststore.base import TrustStore
from vaultdev.adapters.truststore.linux import DebianTrustStore, RhelTrustStore
from vaultdev.adapters.truststore.manual import DarwinTrustStore, UnsupportedTrustStore
from vaultdev.core.models.settings import VaultSettings

logger = logging.getLogger(__name__)


def candidate_trust_stores(
    settings: VaultSettings,
    runner: CommandRunner,
    system: str | None = None,
) -> list[TrustStore]:
    """Every known variant in probe order, fallback last."""
    system = system or platform.system()
    candidates: list[TrustStore] = []
    if system == "Linux":
        candidates.append(DebianTrustStore(runner, settings.hostname, Path(settings.trust.debian_dir)))
        candidates.append(RhelTrustStore(runner, settings.hostname, Path(settings.trust.rhel_dir)))
    candidates.append(
        DarwinTrustStore(runner, settings.hostname, settings.trust.macos_keychain, system=system)
    )
    candidates.append(UnsupportedTrustStore(runner, settings.hostname, system=system))
    return candidates


def select_trust_store(
    settings: VaultSettings,
    runner: CommandRunner,
    system: str | None = None,
) -> TrustStore:
    """Return the first available variant for this machine."""
    for store in candidate_trust_stores(settings, runner, system):
        if store.is_available():
            logger.debug("Selected trust store: %s", store.name)
            return store
    # UnsupportedTrustStore is always available; unreachable in practice.
    return UnsupportedTrustStore(runner, settings.hostname, system=system)
