"""DNS self-check — does the dev hostname resolve to loopback yet?"""

from __future__ import annotations

import logging
import socket
from collections.abc import Callable

logger = logging.getLogger(__name__)


def check_resolution(
    hostname: str,
    expected: str,
    resolve: Callable[[str], str] = socket.gethostbyname,
) -> str | None:
    """Return a warning message, or None when ``hostname`` maps to ``expected``.

    Failures are never fatal: a stale resolver cache often needs a
    moment (or a flush) to pick up a new hosts entry.
    """
    try:
        address = resolve(hostname)
    except OSError as e:
        logger.debug("Resolution of %s failed: %s", hostname, e)
        return f"{hostname} does not resolve yet ({e}); your resolver cache may need flushing"

    if address != expected:
        return f"{hostname} resolves to {address}, expected {expected}"
    return None
