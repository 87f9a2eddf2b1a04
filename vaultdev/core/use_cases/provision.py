"""
Provision use case — bring up a local TLS Vault instance.

Steps, in order (fatal ones abort the run):

    preflight          fatal      privileges, compose support, vault CLI (warning)
    layout             fatal      directories + rendered config files
    certificate        fatal      key + self-signed cert from vault-cert.conf
    hosts.register     fatal      127.0.0.1 <hostname> in the hosts file
    dns.check          best-effort
    trust.register     best-effort
    compose.up         fatal
    compose.health     best-effort (optional)

Every step is idempotent: a second run rewrites the same files,
regenerates the certificate, and leaves a single hosts entry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from vaultdev.adapters.registry import AdapterRegistry
from vaultdev.core.engine.executor import (
    ExecutionPlan,
    ExecutionReport,
    StepCallback,
    execute_plan,
    generate_operation_id,
)
from vaultdev.core.errors import VaultDevError
from vaultdev.core.models.action import Receipt
from vaultdev.core.services import certs, render
from vaultdev.core.services.dns_check import check_resolution
from vaultdev.core.services.preflight import run_preflight

logger = logging.getLogger(__name__)


@dataclass
class ProvisionResult:
    """Result of a provisioning run."""

    report: ExecutionReport
    vault_addr: str = ""
    cert_file: str = ""
    trust_store: str = ""
    manual_trust: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.report.aborted

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "vault_addr": self.vault_addr,
            "cert_file": self.cert_file,
            "trust_store": self.trust_store,
            "manual_trust": self.manual_trust,
            "report": self.report.to_dict(),
        }


# ── Steps ───────────────────────────────────────────────────────


def _preflight(registry: AdapterRegistry) -> Receipt:
    report = run_preflight(registry, require_compose=True)
    meta = {
        "checks": [c.to_dict() for c in report.checks],
        "trust_store": registry.trust_store.label,
    }
    warnings = [c.message for c in report.warnings]
    if not report.ok:
        return Receipt.failure(
            step_id="preflight",
            error="; ".join(c.message for c in report.fatal_failures),
            warnings=warnings,
            metadata=meta,
        )
    passed = f"{len(report.checks)} checks passed" if not warnings else "checks passed with warnings"
    return Receipt.success(
        step_id="preflight",
        output=f"{passed}; trust store: {registry.trust_store.label}",
        warnings=warnings,
        metadata=meta,
    )


def _layout(registry: AdapterRegistry) -> Receipt:
    try:
        result = render.materialize(registry.settings, registry.layout)
    except OSError as e:
        return Receipt.failure(step_id="layout", error=f"Cannot write project files: {e}")

    warnings = [result["ownership_error"]] if result["ownership_error"] else []
    return Receipt.success(
        step_id="layout",
        output=f"Wrote {len(result['written'])} files ({len(result['changed'])} changed)",
        warnings=warnings,
        metadata=result,
    )


def _certificate(registry: AdapterRegistry) -> Receipt:
    layout = registry.layout
    settings = registry.settings
    try:
        info = certs.generate_certificate(
            layout.cert_conf,
            layout.key_file,
            layout.cert_file,
            days=settings.cert_days,
            key_group=settings.data_gid,
        )
    except VaultDevError as e:
        return Receipt.failure(step_id="certificate", error=str(e))
    return Receipt.success(
        step_id="certificate",
        output=f"Certificate and key written to {layout.certs_dir}",
        metadata=info.to_dict(),
    )


def _hosts_register(registry: AdapterRegistry) -> Receipt:
    try:
        written = registry.hosts.add()
    except VaultDevError as e:
        return Receipt.failure(step_id="hosts.register", error=str(e))
    if not written:
        return Receipt.skip(
            step_id="hosts.register",
            reason=f"Entry '{registry.hosts.entry}' already exists",
        )
    return Receipt.success(
        step_id="hosts.register",
        output=f"Added '{registry.hosts.entry}' to {registry.hosts.path}",
    )


def _dns_check(registry: AdapterRegistry) -> Receipt:
    settings = registry.settings
    warning = check_resolution(settings.hostname, settings.loopback, registry.resolve)
    if warning:
        return Receipt.success(step_id="dns.check", output="Resolution check failed", warnings=[warning])
    return Receipt.success(
        step_id="dns.check",
        output=f"{settings.hostname} resolves to {settings.loopback}",
    )


def _trust_register(registry: AdapterRegistry) -> Receipt:
    store = registry.trust_store
    cert_file = registry.layout.cert_file
    meta = {"trust_store": store.name}
    if not store.automatic:
        instructions = store.manual_instructions(cert_file)
        return Receipt.skip(
            step_id="trust.register",
            reason=store.add(cert_file),
            warnings=[f"Manual trust required ({store.label})"],
            metadata={**meta, "instructions": instructions},
        )
    try:
        message = store.add(cert_file)
    except VaultDevError as e:
        return Receipt.failure(step_id="trust.register", error=str(e), metadata=meta)
    return Receipt.success(step_id="trust.register", output=message, metadata=meta)


def _compose_up(registry: AdapterRegistry) -> Receipt:
    try:
        output = registry.compose.up()
    except VaultDevError as e:
        return Receipt.failure(step_id="compose.up", error=str(e))
    return Receipt.success(step_id="compose.up", output=output or "Vault container started")


def _compose_health(registry: AdapterRegistry) -> Receipt:
    budget = registry.settings.healthcheck.budget_seconds
    kwargs = {"sleep": registry.sleep} if registry.sleep is not None else {}
    status = registry.compose.wait_healthy(budget, **kwargs)
    if status == "healthy":
        return Receipt.success(step_id="compose.health", output="Container reports healthy")
    return Receipt.failure(
        step_id="compose.health",
        error=f"Container not healthy after {budget}s (status: {status or 'unknown'})",
    )


# ── Use case ────────────────────────────────────────────────────


def build_provision_plan(registry: AdapterRegistry, wait_healthy: bool = True) -> ExecutionPlan:
    plan = ExecutionPlan(operation_id=generate_operation_id("setup"), workflow="setup")
    plan.add("preflight", "Preflight checks", lambda: _preflight(registry), fatal=True)
    plan.add("layout", "Project files", lambda: _layout(registry), fatal=True)
    plan.add("certificate", "TLS certificate", lambda: _certificate(registry), fatal=True)
    plan.add("hosts.register", "Hosts entry", lambda: _hosts_register(registry), fatal=True)
    plan.add("dns.check", "DNS self-check", lambda: _dns_check(registry))
    plan.add("trust.register", "Trust certificate", lambda: _trust_register(registry))
    plan.add("compose.up", "Start container", lambda: _compose_up(registry), fatal=True)
    if wait_healthy:
        plan.add("compose.health", "Wait for healthy", lambda: _compose_health(registry))
    return plan


def run_provision(
    registry: AdapterRegistry,
    wait_healthy: bool = True,
    on_step: StepCallback | None = None,
) -> ProvisionResult:
    """Provision the working directory described by ``registry``."""
    plan = build_provision_plan(registry, wait_healthy=wait_healthy)
    logger.info("Provisioning %s in %s", registry.settings.hostname, registry.layout.root)
    report = execute_plan(plan, on_step=on_step)

    store = registry.trust_store
    return ProvisionResult(
        report=report,
        vault_addr=registry.settings.vault_addr,
        cert_file=str(registry.layout.cert_file),
        trust_store=store.label,
        manual_trust=store.manual_instructions(registry.layout.cert_file),
    )
