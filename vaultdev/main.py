"""
vaultdev — CLI entrypoint.

Usage:
    vaultdev --help
    vaultdev setup
    vaultdev cleanup --yes
    vaultdev status --json

    vault-setup      (same as ``vaultdev setup``)
    vault-cleanup    (same as ``vaultdev cleanup``)
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from vaultdev import __version__
from vaultdev.core.observability.logging_config import resolve_level, setup_logging

_DIR_OPTION = click.Path(file_okay=False, path_type=Path)
_CONFIG_OPTION = click.Path(dir_okay=False, path_type=Path)


def _load_registry(config_path: Path | None, root: Path | None):
    """Load settings and build adapters; exit 1 on configuration errors."""
    from vaultdev.adapters.registry import build_registry
    from vaultdev.core.config.loader import ConfigError, load_settings

    root = (root or Path.cwd()).resolve()
    try:
        settings = load_settings(path=config_path, root=root)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
    return build_registry(settings, root)


def _confirm() -> None:
    # Ctrl+C or EOF raises click.Abort, which click turns into exit code 1
    click.prompt(
        "Press Enter to continue or Ctrl+C to cancel",
        default="",
        show_default=False,
    )


def _setup(
    config_path: Path | None,
    root: Path | None,
    yes: bool,
    wait: bool,
    quiet: bool = False,
) -> None:
    from vaultdev.core.use_cases.provision import run_provision
    from vaultdev.ui.cli import output

    registry = _load_registry(config_path, root)
    output.print_setup_banner(registry)
    if not yes:
        _confirm()

    result = run_provision(registry, wait_healthy=wait, on_step=output.step_printer(quiet))
    output.print_summary(result.report)
    if not result.ok:
        sys.exit(1)

    output.print_next_steps(result.vault_addr, result.cert_file, result.manual_trust)


def _cleanup(
    config_path: Path | None,
    root: Path | None,
    yes: bool,
    quiet: bool = False,
) -> None:
    from vaultdev.core.use_cases.teardown import run_teardown
    from vaultdev.ui.cli import output

    registry = _load_registry(config_path, root)
    output.print_cleanup_banner(registry)
    if not yes:
        _confirm()

    result = run_teardown(registry, on_step=output.step_printer(quiet))
    output.print_summary(result.report)
    if not result.ok:
        sys.exit(1)

    output.print_manual_trust(
        result.manual_trust,
        heading="The certificate may still be trusted. To remove it, run:",
    )
    click.echo()


# ── vaultdev group ──────────────────────────────────────────────


@click.group()
@click.version_option(version=__version__, prog_name="vaultdev")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=_CONFIG_OPTION,
    default=None,
    help="Path to vaultdev.yml (default: <dir>/vaultdev.yml if present).",
)
@click.option(
    "--dir",
    "-d",
    "root",
    type=_DIR_OPTION,
    default=None,
    help="Working directory for generated files (default: current directory).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: Path | None,
    root: Path | None,
) -> None:
    """vaultdev — provision and tear down a local TLS Vault for development."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = config_path
    ctx.obj["root"] = root

    setup_logging(level=resolve_level(debug=debug, verbose=verbose, quiet=quiet))


@cli.command()
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
@click.option("--no-wait", is_flag=True, help="Don't wait for the container to become healthy.")
@click.pass_context
def setup(ctx: click.Context, yes: bool, no_wait: bool) -> None:
    """Generate certs and config, register the hostname, start Vault."""
    _setup(ctx.obj["config_path"], ctx.obj["root"], yes, not no_wait, ctx.obj["quiet"])


@cli.command()
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_context
def cleanup(ctx: click.Context, yes: bool) -> None:
    """Stop Vault and remove everything setup created (including data)."""
    _cleanup(ctx.obj["config_path"], ctx.obj["root"], yes, ctx.obj["quiet"])


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, as_json: bool) -> None:
    """Show what is provisioned in the working directory."""
    from vaultdev.core.use_cases.status import get_status
    from vaultdev.ui.cli import output

    registry = _load_registry(ctx.obj["config_path"], ctx.obj["root"])
    result = get_status(registry)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    output.print_status(result.to_dict())


# ── Standalone scripts ──────────────────────────────────────────


@click.command()
@click.version_option(version=__version__, prog_name="vault-setup")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
@click.option("--dir", "-d", "root", type=_DIR_OPTION, default=None, help="Working directory.")
@click.option("--config", "-c", "config_path", type=_CONFIG_OPTION, default=None, help="Path to vaultdev.yml.")
@click.option("--no-wait", is_flag=True, help="Don't wait for the container to become healthy.")
def vault_setup(yes: bool, root: Path | None, config_path: Path | None, no_wait: bool) -> None:
    """Provision a local Vault server with TLS for development."""
    setup_logging(level=resolve_level())
    _setup(config_path, root, yes, not no_wait)


@click.command()
@click.version_option(version=__version__, prog_name="vault-cleanup")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
@click.option("--dir", "-d", "root", type=_DIR_OPTION, default=None, help="Working directory.")
@click.option("--config", "-c", "config_path", type=_CONFIG_OPTION, default=None, help="Path to vaultdev.yml.")
def vault_cleanup(yes: bool, root: Path | None, config_path: Path | None) -> None:
    """Remove the local Vault server, its data, certificates and registrations."""
    setup_logging(level=resolve_level())
    _cleanup(config_path, root, yes)


if __name__ == "__main__":
    cli()
