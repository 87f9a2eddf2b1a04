"""
Teardown use case — reverse everything provisioning created.

Only the privilege check is fatal. Every other step is best-effort:
teardown must make as much progress as possible even when some
resource is already gone.

    preflight          fatal
    compose.down       best-effort (skipped without docker-compose.yml)
    files.remove       best-effort
    hosts.deregister   best-effort
    trust.deregister   best-effort
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from vaultdev.adapters.registry import AdapterRegistry
from vaultdev.adapters.shell import filesystem
from vaultdev.adapters.truststore.manual import DarwinTrustStore
from vaultdev.core.engine.executor import (
    ExecutionPlan,
    ExecutionReport,
    StepCallback,
    execute_plan,
    generate_operation_id,
)
from vaultdev.core.errors import VaultDevError
from vaultdev.core.models.action import Receipt
from vaultdev.core.services.preflight import run_preflight

logger = logging.getLogger(__name__)


@dataclass
class TeardownResult:
    """Result of a teardown run."""

    report: ExecutionReport
    removed: list[str] = field(default_factory=list)
    manual_trust: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.report.aborted

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "removed": self.removed,
            "manual_trust": self.manual_trust,
            "report": self.report.to_dict(),
        }


# ── Steps ───────────────────────────────────────────────────────


def _preflight(registry: AdapterRegistry) -> Receipt:
    report = run_preflight(registry, require_compose=False)
    if not report.ok:
        return Receipt.failure(
            step_id="preflight",
            error="; ".join(c.message for c in report.fatal_failures),
        )
    return Receipt.success(step_id="preflight", output="Running with elevated privileges")


def _compose_down(registry: AdapterRegistry) -> Receipt:
    compose = registry.compose
    if not compose.has_declaration():
        return Receipt.skip(
            step_id="compose.down",
            reason="No docker-compose.yml found. Skipping container cleanup.",
        )
    if not compose.docker_available():
        return Receipt.failure(step_id="compose.down", error="docker CLI not found on PATH")
    try:
        output = compose.down()
    except VaultDevError as e:
        return Receipt.failure(step_id="compose.down", error=str(e))
    return Receipt.success(step_id="compose.down", output=output or "Container stopped and removed")


def _files_remove(registry: AdapterRegistry, removed_out: list[str]) -> Receipt:
    layout = registry.layout
    targets = [*layout.generated_paths(), *layout.backup_paths()]
    try:
        removed = filesystem.remove_paths(targets)
    except OSError as e:
        return Receipt.failure(step_id="files.remove", error=f"Cannot remove project files: {e}")

    names = [str(p.relative_to(layout.root)) for p in removed]
    removed_out.extend(names)
    if not names:
        return Receipt.skip(step_id="files.remove", reason="No generated files found")
    return Receipt.success(
        step_id="files.remove",
        output=f"Removed {', '.join(names)}",
        metadata={"removed": names},
    )


def _hosts_deregister(registry: AdapterRegistry) -> Receipt:
    try:
        count = registry.hosts.remove()
    except VaultDevError as e:
        return Receipt.failure(step_id="hosts.deregister", error=str(e))
    if count == 0:
        return Receipt.skip(step_id="hosts.deregister", reason="Entry not found. Skipping.")
    return Receipt.success(
        step_id="hosts.deregister",
        output=f"Removed '{registry.hosts.entry}' from {registry.hosts.path}",
        metadata={"lines_removed": count},
    )


def _trust_deregister(registry: AdapterRegistry) -> Receipt:
    store = registry.trust_store
    meta = {"trust_store": store.name}
    if not store.automatic:
        return Receipt.skip(
            step_id="trust.deregister",
            reason=f"Manual cleanup of the trusted certificate may be required ({store.label})",
            metadata={**meta, "instructions": _removal_instructions(registry)},
        )
    try:
        message = store.remove()
    except VaultDevError as e:
        return Receipt.failure(step_id="trust.deregister", error=str(e), metadata=meta)
    if message is None:
        return Receipt.skip(
            step_id="trust.deregister",
            reason=f"No certificate found in the {store.label} trust store. Skipping.",
            metadata=meta,
        )
    return Receipt.success(step_id="trust.deregister", output=message, metadata=meta)


def _removal_instructions(registry: AdapterRegistry) -> list[str]:
    store = registry.trust_store
    if isinstance(store, DarwinTrustStore):
        return store.removal_instructions()
    if store.automatic:
        return []
    return [f"Remove '{registry.settings.hostname}' from your OS trust store manually"]


# ── Use case ────────────────────────────────────────────────────


def run_teardown(registry: AdapterRegistry, on_step: StepCallback | None = None) -> TeardownResult:
    """Tear down the working directory described by ``registry``."""
    removed: list[str] = []
    plan = ExecutionPlan(operation_id=generate_operation_id("cleanup"), workflow="cleanup")
    plan.add("preflight", "Preflight checks", lambda: _preflight(registry), fatal=True)
    plan.add("compose.down", "Stop container", lambda: _compose_down(registry))
    plan.add("files.remove", "Remove project files", lambda: _files_remove(registry, removed))
    plan.add("hosts.deregister", "Remove hosts entry", lambda: _hosts_deregister(registry))
    plan.add("trust.deregister", "Untrust certificate", lambda: _trust_deregister(registry))

    logger.info("Tearing down %s in %s", registry.settings.hostname, registry.layout.root)
    report = execute_plan(plan, on_step=on_step)
    return TeardownResult(
        report=report,
        removed=removed,
        manual_trust=_removal_instructions(registry),
    )
