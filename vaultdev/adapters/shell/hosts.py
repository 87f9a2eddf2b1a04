"""
Hosts-file adapter — register and de-register the loopback mapping.

Narrow interface over the system hosts file (check / add / remove) so
the workflows can run against a temporary file in tests.

Matching is done on whitespace-normalised lines with comments
stripped: ``127.0.0.1   vault.example.com  # dev`` matches, while
``127.0.0.1 localhost vault.example.com`` does not and is never touched.
"""

from __future__ import annotations

import logging
from pathlib import Path

from vaultdev.core.errors import HostsFileError

logger = logging.getLogger(__name__)


def _normalise(line: str) -> list[str]:
    return line.split("#", 1)[0].split()


class HostsFile:
    """One hosts file and one ``<address> <hostname>`` entry."""

    def __init__(self, path: Path, address: str, hostname: str):
        self.path = Path(path)
        self.address = address
        self.hostname = hostname

    @property
    def entry(self) -> str:
        return f"{self.address} {self.hostname}"

    def _matches(self, line: str) -> bool:
        return _normalise(line) == [self.address, self.hostname]

    def _read(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""
        except OSError as e:
            raise HostsFileError(f"Cannot read {self.path}: {e}") from e

    def count(self) -> int:
        """Number of lines that are exactly the managed entry."""
        return sum(1 for line in self._read().splitlines() if self._matches(line))

    def has_entry(self) -> bool:
        return self.count() > 0

    def add(self) -> bool:
        """Append the entry unless present. Returns True when written."""
        content = self._read()
        if any(self._matches(line) for line in content.splitlines()):
            logger.debug("Hosts entry already present in %s", self.path)
            return False

        # Keep the file's own ending so remove() can restore it byte for byte
        if not content or content.endswith("\n"):
            line = f"{self.entry}\n"
        else:
            line = f"\n{self.entry}"
        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line)
        except OSError as e:
            raise HostsFileError(f"Cannot write {self.path}: {e}") from e

        logger.info("Added '%s' to %s", self.entry, self.path)
        return True

    def remove(self) -> int:
        """Delete every matching line. Returns the number removed."""
        content = self._read()
        lines = content.splitlines(keepends=True)
        kept = [line for line in lines if not self._matches(line)]
        removed = len(lines) - len(kept)
        if removed == 0:
            return 0

        # A bare final entry means the file had no trailing newline before add()
        if not lines[-1].endswith("\n") and self._matches(lines[-1]) and kept:
            kept[-1] = kept[-1].rstrip("\r\n")

        # Rewritten in place: /etc/hosts is often a bind mount and
        # cannot be replaced by rename.
        try:
            with self.path.open("w", encoding="utf-8") as f:
                f.writelines(kept)
        except OSError as e:
            raise HostsFileError(f"Cannot write {self.path}: {e}") from e

        logger.info("Removed %d '%s' line(s) from %s", removed, self.entry, self.path)
        return removed
