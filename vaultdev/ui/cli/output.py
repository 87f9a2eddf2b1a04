"""
Console rendering for the setup, cleanup and status commands.

Workflows report through receipts; this module turns them into the
coloured, icon-prefixed lines an operator reads.
"""

from __future__ import annotations

import click

from vaultdev.adapters.registry import AdapterRegistry
from vaultdev.core.engine.executor import ExecutionReport, StepCallback
from vaultdev.core.models.action import Receipt, Step

_STATUS_COLOR = {"ok": "green", "partial": "yellow", "failed": "red"}


def step_printer(quiet: bool = False) -> StepCallback:
    """Build an ``on_step`` callback that prints each receipt as it lands."""

    def _print(step: Step, receipt: Receipt) -> None:
        if receipt.ok:
            if not quiet:
                detail = f" — {receipt.output}" if receipt.output else ""
                click.secho(f"✅ {step.name}{detail}", fg="green")
        elif receipt.skipped:
            if not quiet:
                detail = f" — {receipt.output}" if receipt.output else ""
                click.secho(f"⏭️  {step.name}{detail}", fg="cyan")
        else:
            marker = "❌" if step.fatal else "⚠️ "
            click.secho(f"{marker} {step.name} — {receipt.error}", fg="red" if step.fatal else "yellow")

        for warning in receipt.warnings:
            click.secho(f"   ⚠️  {warning}", fg="yellow")

    return _print


def print_setup_banner(registry: AdapterRegistry) -> None:
    settings = registry.settings
    click.secho(f"\n🔐 Vault dev setup for {settings.hostname}", fg="cyan", bold=True)
    click.echo(f"   Directory:   {registry.layout.root}")
    click.echo(f"   Image:       {settings.image}")
    click.echo(f"   Address:     {settings.vault_addr}")
    click.echo(f"   Hosts file:  {registry.hosts.path} ({registry.hosts.entry})")
    click.echo(f"   Trust store: {registry.trust_store.label}")
    click.echo()


def print_cleanup_banner(registry: AdapterRegistry) -> None:
    click.secho(f"\n🧹 Vault dev cleanup for {registry.settings.hostname}", fg="cyan", bold=True)
    click.echo(f"   Directory: {registry.layout.root}")
    existing = registry.layout.existing_paths()
    if existing:
        click.echo("   Will delete:")
        for path in existing:
            click.echo(f"     • {path.relative_to(registry.layout.root)}")
    click.echo()
    click.secho(
        "⚠️  WARNING: This permanently deletes all Vault data in "
        f"{registry.layout.data_dir.name}/ along with certificates and configuration.",
        fg="red",
        bold=True,
    )
    click.echo()


def print_summary(report: ExecutionReport) -> None:
    click.echo()
    color = _STATUS_COLOR.get(report.status, "white")
    click.secho(
        f"{report.workflow}: {report.status} "
        f"({report.succeeded} ok, {report.skipped} skipped, {report.failed} failed)",
        fg=color,
        bold=True,
    )
    if report.aborted:
        click.secho(f"   Stopped at {report.aborted_at}", fg="red")
        if report.not_run:
            click.echo(f"   Not run: {', '.join(report.not_run)}")


def print_next_steps(vault_addr: str, cert_file: str, manual_trust: list[str]) -> None:
    click.echo()
    click.secho("🚀 Next steps:", fg="cyan", bold=True)
    click.echo(f"   export VAULT_ADDR={vault_addr}")
    click.echo(f"   export VAULT_CACERT={cert_file}")
    click.echo("   vault operator init")
    click.echo("   vault operator unseal")
    print_manual_trust(manual_trust, heading="To trust the certificate system-wide, run:")
    click.echo()


def print_manual_trust(instructions: list[str], heading: str) -> None:
    if not instructions:
        return
    click.echo()
    click.secho(f"🔏 {heading}", fg="yellow")
    for line in instructions:
        click.echo(f"   {line}")


def _mark(flag: bool | None) -> str:
    if flag is None:
        return "—"
    return "✅" if flag else "❌"


def print_status(data: dict) -> None:
    state = "provisioned" if data["provisioned"] else "not provisioned"
    click.secho(f"\n🔐 {data['hostname']} ({state})", fg="cyan", bold=True)
    click.echo(f"   Directory: {data['root']}")
    click.echo()

    click.secho("   Files:", fg="white", bold=True)
    for name, present in data["paths"].items():
        click.echo(f"     {_mark(present)} {name}")

    cert = data.get("certificate")
    if cert:
        click.echo()
        click.secho("   Certificate:", fg="white", bold=True)
        click.echo(f"     CN:       {cert['common_name']}")
        click.echo(f"     SAN:      {', '.join(cert['dns_names'])}")
        click.echo(f"     Key:      RSA {cert['key_size']}")
        click.echo(f"     Expires:  {cert['not_after']}")
        if cert["expired"]:
            click.secho("     ⚠️  Certificate has expired — run setup again", fg="yellow")
    elif data.get("certificate_error"):
        click.secho(f"   ❌ {data['certificate_error']}", fg="red")

    click.echo()
    click.secho("   Registration:", fg="white", bold=True)
    click.echo(f"     {_mark(data['hosts_entry'])} hosts entry")
    if data.get("hosts_error"):
        click.secho(f"       {data['hosts_error']}", fg="yellow")
    click.echo(f"     {_mark(data['trusted'])} trust store ({data['trust_store']})")

    adapters = data["adapters"]
    click.echo()
    click.secho("   Tools:", fg="white", bold=True)
    compose_version = adapters["docker"]["compose_version"]
    click.echo(f"     {_mark(adapters['docker']['available'])} docker")
    click.echo(f"     {_mark(compose_version is not None)} docker compose {compose_version or ''}".rstrip())
    click.echo(f"     {_mark(adapters['vault_cli']['available'])} vault CLI")
    click.echo(f"     {_mark(adapters['privileged'])} elevated privileges")

    if data["services"]:
        click.echo()
        click.secho("   Containers:", fg="white", bold=True)
        for svc in data["services"]:
            name = svc.get("Name") or svc.get("Service", "?")
            click.echo(f"     • {name}: {svc.get('State', '?')} {svc.get('Health', '')}".rstrip())
    elif data.get("compose_error"):
        click.secho(f"   ⚠️  {data['compose_error']}", fg="yellow")

    click.echo()
