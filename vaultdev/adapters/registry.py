"""
Adapter registry — every external resource a workflow touches.

The use cases never construct adapters themselves: they receive an
``AdapterRegistry``. The CLI builds the real one with
``build_registry``; tests build one around fakes (``MockRunner``, a
temporary hosts file, a temporary anchor directory).
"""

from __future__ import annotations

import logging
import os
import socket
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from vaultdev.adapters.containers.docker import ComposeController
from vaultdev.adapters.shell.command import CommandRunner
from vaultdev.adapters.shell.hosts import HostsFile
from vaultdev.adapters.truststore import TrustStore, select_trust_store
from vaultdev.core.models.layout import ProjectLayout
from vaultdev.core.models.settings import VaultSettings

logger = logging.getLogger(__name__)


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def _resolve(hostname: str) -> str:
    return socket.gethostbyname(hostname)


@dataclass
class AdapterRegistry:
    """Resolved adapters for one working directory."""

    settings: VaultSettings
    layout: ProjectLayout
    runner: Any                      # CommandRunner or MockRunner
    hosts: HostsFile
    trust_store: TrustStore
    compose: ComposeController
    is_privileged: Callable[[], bool] = _is_root
    resolve: Callable[[str], str] = _resolve
    sleep: Callable[[float], None] | None = None

    def adapter_status(self) -> dict[str, Any]:
        """Availability of each external tool, for status output."""
        compose_version = self.compose.compose_version()
        return {
            "docker": {
                "available": self.compose.docker_available(),
                "compose_version": compose_version,
            },
            "trust_store": {
                "name": self.trust_store.name,
                "label": self.trust_store.label,
                "automatic": self.trust_store.automatic,
            },
            "vault_cli": {"available": self.runner.which("vault") is not None},
            "hosts_file": {"path": str(self.hosts.path)},
            "privileged": self.is_privileged(),
        }


def build_registry(
    settings: VaultSettings,
    root: Path,
    runner: Any = None,
    system: str | None = None,
) -> AdapterRegistry:
    """Build the registry for a real machine (or a supplied runner)."""
    runner = runner or CommandRunner()
    layout = ProjectLayout.for_root(root, settings.hostname)
    registry = AdapterRegistry(
        settings=settings,
        layout=layout,
        runner=runner,
        hosts=HostsFile(Path(settings.hosts_file), settings.loopback, settings.hostname),
        trust_store=select_trust_store(settings, runner, system=system),
        compose=ComposeController(runner, layout, container_name=settings.container_name),
    )
    logger.debug(
        "Registry built: root=%s trust=%s hosts=%s",
        layout.root,
        registry.trust_store.name,
        registry.hosts.path,
    )
    return registry
