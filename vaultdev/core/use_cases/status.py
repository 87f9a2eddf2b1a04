"""
Status use case — read-only view of a working directory.

Reports which generated paths exist, what the certificate claims,
whether the hosts entry and trust-store registration are in place,
and what compose says about the service. Never mutates anything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from vaultdev.adapters.registry import AdapterRegistry
from vaultdev.core.errors import VaultDevError
from vaultdev.core.services.certs import inspect_certificate

logger = logging.getLogger(__name__)


@dataclass
class StatusResult:
    hostname: str = ""
    root: str = ""
    paths: dict[str, bool] = field(default_factory=dict)
    certificate: dict[str, Any] | None = None
    certificate_error: str | None = None
    hosts_entry: bool = False
    hosts_error: str | None = None
    trust_store: str = ""
    trusted: bool | None = None
    services: list[dict] = field(default_factory=list)
    compose_error: str | None = None
    adapters: dict[str, Any] = field(default_factory=dict)

    @property
    def provisioned(self) -> bool:
        return bool(self.paths) and all(self.paths.values())

    def to_dict(self) -> dict:
        return {
            "hostname": self.hostname,
            "root": self.root,
            "provisioned": self.provisioned,
            "paths": self.paths,
            "certificate": self.certificate,
            "certificate_error": self.certificate_error,
            "hosts_entry": self.hosts_entry,
            "hosts_error": self.hosts_error,
            "trust_store": self.trust_store,
            "trusted": self.trusted,
            "services": self.services,
            "compose_error": self.compose_error,
            "adapters": self.adapters,
        }


def get_status(registry: AdapterRegistry) -> StatusResult:
    layout = registry.layout
    result = StatusResult(hostname=registry.settings.hostname, root=str(layout.root))

    for path in [*layout.generated_paths(), layout.key_file, layout.cert_file]:
        result.paths[str(path.relative_to(layout.root))] = path.exists()

    if layout.cert_file.is_file():
        try:
            result.certificate = inspect_certificate(layout.cert_file).to_dict()
        except VaultDevError as e:
            result.certificate_error = str(e)

    try:
        result.hosts_entry = registry.hosts.has_entry()
    except VaultDevError as e:
        result.hosts_error = str(e)

    store = registry.trust_store
    result.trust_store = store.label
    result.trusted = store.contains() if store.automatic or store.name == "darwin" else None

    result.adapters = registry.adapter_status()
    if registry.compose.has_declaration() and result.adapters["docker"]["compose_version"]:
        try:
            result.services = registry.compose.ps()
        except (VaultDevError, ValueError) as e:
            result.compose_error = str(e)

    return result
