"""
Domain models — Pydantic types and layout paths for vaultdev.

All models are re-exported here for convenient access:

    from vaultdev.core.models import VaultSettings, ProjectLayout, Step, Receipt
"""

from vaultdev.core.models.action import Receipt, Step
from vaultdev.core.models.layout import ProjectLayout
from vaultdev.core.models.settings import HealthCheck, TrustPaths, VaultSettings

__all__ = [
    # action.py
    "Receipt",
    "Step",
    # layout.py
    "ProjectLayout",
    # settings.py
    "HealthCheck",
    "TrustPaths",
    "VaultSettings",
]
