"""
Shared test fixtures and configuration.

Every external resource is faked: commands go to a ``MockRunner``,
the hosts file and trust-store anchor directories live under
``tmp_path``, privileges and DNS resolution are stubbed.
"""

from pathlib import Path
from types import SimpleNamespace

import pytest
import yaml

from vaultdev.adapters import registry as registry_module
from vaultdev.adapters.mock import MockRunner
from vaultdev.adapters.registry import build_registry
from vaultdev.core.models.settings import TrustPaths, VaultSettings

HOSTS_CONTENT = "127.0.0.1 localhost\n::1 localhost ip6-localhost\n"


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Empty working directory for generated files."""
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def hosts_file(tmp_path: Path) -> Path:
    path = tmp_path / "hosts"
    path.write_text(HOSTS_CONTENT)
    return path


@pytest.fixture
def settings(tmp_path: Path, hosts_file: Path) -> VaultSettings:
    return VaultSettings(
        hosts_file=str(hosts_file),
        trust=TrustPaths(
            debian_dir=str(tmp_path / "ca-certificates"),
            rhel_dir=str(tmp_path / "anchors"),
            macos_keychain=str(tmp_path / "System.keychain"),
        ),
    )


@pytest.fixture
def runner() -> MockRunner:
    """Debian-like machine with docker compose v2 and a healthy container."""
    mock = MockRunner(available={"docker", "update-ca-certificates"})
    mock.set_response(["docker", "compose", "version"], stdout="2.24.5\n")
    mock.set_response(["docker", "inspect"], stdout="healthy\n")
    return mock


@pytest.fixture
def make_registry():
    """Factory: build a registry around fakes."""

    def _make(settings, root, runner, system="Linux", privileged=True, resolves_to=None):
        reg = build_registry(settings, root, runner=runner, system=system)
        reg.is_privileged = lambda: privileged
        reg.resolve = lambda hostname: resolves_to or settings.loopback
        reg.sleep = lambda seconds: None
        return reg

    return _make


@pytest.fixture
def registry(settings, workdir, runner, make_registry):
    return make_registry(settings, workdir, runner)


@pytest.fixture
def machine(monkeypatch, settings, workdir, runner, make_registry):
    """Route the CLI's ``build_registry`` to fakes.

    Settings reach the CLI through a ``vaultdev.yml`` in the working
    directory, so the config loader is exercised as well. Flip
    ``machine.privileged`` to simulate running without sudo.
    """
    (workdir / "vaultdev.yml").write_text(yaml.safe_dump({"vault": settings.model_dump()}))
    state = SimpleNamespace(runner=runner, privileged=True, workdir=workdir, settings=settings)

    def _build(loaded, root, runner=None, system=None):
        return make_registry(loaded, root, state.runner, privileged=state.privileged)

    monkeypatch.setattr(registry_module, "build_registry", _build)
    return state
