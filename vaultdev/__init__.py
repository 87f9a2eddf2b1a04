"""vaultdev — local self-signed-TLS Vault development environment."""

__version__ = "0.1.0"
