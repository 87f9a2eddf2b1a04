"""Trust-store adapters — one per OS family.

Public re-exports for convenient access.
"""

from vaultdev.adapters.truststore.base import AnchorDirTrustStore, TrustStore
from vaultdev.adapters.truststore.detect import candidate_trust_stores, select_trust_store
from vaultdev.adapters.truststore.linux import DebianTrustStore, RhelTrustStore
from vaultdev.adapters.truststore.manual import DarwinTrustStore, UnsupportedTrustStore

__all__ = [
    "AnchorDirTrustStore",
    "DarwinTrustStore",
    "DebianTrustStore",
    "RhelTrustStore",
    "TrustStore",
    "UnsupportedTrustStore",
    "candidate_trust_stores",
    "select_trust_store",
]
