"""
Config rendering — the static files a Vault dev instance needs.

Four files are rendered from ``VaultSettings``:

    vault-cert.conf     OpenSSL request config (input to certificate generation)
    vault/vault.hcl     Vault server listener + storage config
    .env                image reference and host port for compose
    docker-compose.yml  the single Vault service declaration

The compose file reads ``VAULT_IMAGE`` / ``VAULT_PORT`` from the env
file so a version bump only touches ``.env``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from vaultdev.adapters.shell import filesystem
from vaultdev.core.models.layout import (
    CERT_CONF_FILE,
    CERTS_DIR,
    COMPOSE_FILE,
    DATA_DIR,
    ENV_FILE,
    SERVER_CONF_FILE,
    VAULT_DIR,
    ProjectLayout,
)
from vaultdev.core.models.settings import VaultSettings
from vaultdev.core.models.template import GeneratedFile

logger = logging.getLogger(__name__)

# Paths inside the container
CONTAINER_CONFIG = "/vault/config/vault.hcl"
CONTAINER_TLS_DIR = "/vault/tls"
CONTAINER_DATA_DIR = "/vault/data"

# ``vault status`` exits 0 (unsealed), 2 (sealed) or 1 (error). A fresh,
# uninitialised server is sealed but healthy.
HEALTHCHECK_CMD = "vault status -tls-skip-verify >/dev/null 2>&1; [ $$? -ne 1 ]"


def render_cert_conf(settings: VaultSettings) -> str:
    return (
        "[req]\n"
        f"default_bits       = {settings.key_bits}\n"
        "distinguished_name = req_distinguished_name\n"
        "req_extensions     = req_ext\n"
        "x509_extensions    = v3_req\n"
        "prompt             = no\n"
        "\n"
        "[req_distinguished_name]\n"
        f"CN = {settings.hostname}\n"
        "\n"
        "[req_ext]\n"
        "subjectAltName = @alt_names\n"
        "\n"
        "[v3_req]\n"
        "subjectAltName = @alt_names\n"
        "\n"
        "[alt_names]\n"
        f"DNS.1 = {settings.hostname}\n"
    )


def render_server_conf(settings: VaultSettings) -> str:
    host = settings.hostname
    return (
        'listener "tcp" {\n'
        f'  address       = "0.0.0.0:{settings.container_port}"\n'
        f'  tls_cert_file = "{CONTAINER_TLS_DIR}/{host}.crt"\n'
        f'  tls_key_file  = "{CONTAINER_TLS_DIR}/{host}.key"\n'
        "}\n"
        "\n"
        'storage "file" {\n'
        f'  path = "{CONTAINER_DATA_DIR}"\n'
        "}\n"
        "\n"
        "ui = true\n"
    )


def render_env(settings: VaultSettings) -> str:
    return (
        "# Consumed by docker compose (--env-file). Edit to bump the image.\n"
        f"VAULT_IMAGE={settings.image}\n"
        f"VAULT_PORT={settings.host_port}\n"
    )


def compose_definition(settings: VaultSettings) -> dict[str, Any]:
    """The compose declaration as a plain mapping."""
    hc = settings.healthcheck
    service = {
        "image": f"${{VAULT_IMAGE:-{settings.image}}}",
        "container_name": settings.container_name,
        "ports": [f"${{VAULT_PORT:-{settings.host_port}}}:{settings.container_port}"],
        "cap_add": ["IPC_LOCK"],
        "volumes": [
            f"./{VAULT_DIR}/{SERVER_CONF_FILE}:{CONTAINER_CONFIG}",
            f"./{CERTS_DIR}:{CONTAINER_TLS_DIR}:ro",
            f"./{DATA_DIR}:{CONTAINER_DATA_DIR}",
        ],
        "environment": {
            "VAULT_LOCAL_CONFIG": CONTAINER_CONFIG,
            "VAULT_ADDR": f"https://127.0.0.1:{settings.container_port}",
        },
        "command": ["vault", "server", f"-config={CONTAINER_CONFIG}"],
        "healthcheck": {
            "test": ["CMD-SHELL", HEALTHCHECK_CMD],
            "interval": f"{hc.interval_seconds}s",
            "retries": hc.retries,
        },
    }
    return {"services": {settings.service_name: service}}


def render_compose(settings: VaultSettings) -> str:
    header = "# Generated by vaultdev. Image and host port come from .env.\n"
    return header + yaml.safe_dump(
        compose_definition(settings),
        default_flow_style=False,
        sort_keys=False,
    )


def render_all(settings: VaultSettings) -> list[GeneratedFile]:
    """Every rendered file, in write order."""
    return [
        GeneratedFile(
            path=CERT_CONF_FILE,
            content=render_cert_conf(settings),
            reason="certificate request config",
        ),
        GeneratedFile(
            path=f"{VAULT_DIR}/{SERVER_CONF_FILE}",
            content=render_server_conf(settings),
            reason="Vault server config",
        ),
        GeneratedFile(
            path=ENV_FILE,
            content=render_env(settings),
            reason="compose environment",
        ),
        GeneratedFile(
            path=COMPOSE_FILE,
            content=render_compose(settings),
            reason="compose service declaration",
        ),
    ]


def materialize(
    settings: VaultSettings,
    layout: ProjectLayout,
    chown: bool = True,
) -> dict[str, Any]:
    """Create the directory tree and overwrite every rendered file.

    Returns:
        {"created_dirs": [...], "written": [...], "changed": [...],
         "ownership_error": str | None}
    """
    created = filesystem.make_dirs(layout.directories())
    written: list[str] = []
    changed: list[str] = []
    for gen in render_all(settings):
        target = layout.root / Path(gen.path)
        if filesystem.write_file(target, gen.content):
            changed.append(gen.path)
        written.append(gen.path)

    ownership_error = None
    if chown:
        try:
            filesystem.chown_tree(layout.data_dir, settings.data_uid, settings.data_gid)
        except OSError as e:
            ownership_error = (
                f"Cannot set owner of {layout.data_dir} to "
                f"{settings.data_uid}:{settings.data_gid}: {e}"
            )
            logger.warning("%s", ownership_error)

    logger.info("Materialized %d files in %s", len(written), layout.root)
    return {
        "created_dirs": [str(p.relative_to(layout.root)) for p in created],
        "written": written,
        "changed": changed,
        "ownership_error": ownership_error,
    }
