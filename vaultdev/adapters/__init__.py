"""Adapters — bindings for docker, the hosts file and OS trust stores.

Public re-exports for convenient access.
"""

from vaultdev.adapters.containers.docker import ComposeController
from vaultdev.adapters.mock import MockRunner
from vaultdev.adapters.registry import AdapterRegistry, build_registry
from vaultdev.adapters.shell.command import CommandRunner
from vaultdev.adapters.shell.hosts import HostsFile

__all__ = [
    "AdapterRegistry",
    "CommandRunner",
    "ComposeController",
    "HostsFile",
    "MockRunner",
    "build_registry",
]
