"""
Certificate generation — self-signed TLS material for the dev hostname.

Input is the rendered ``vault-cert.conf`` (OpenSSL request syntax):
the common name, the ``[alt_names]`` DNS entries and ``default_bits``
are read from it, so the file on disk stays the single source of truth
for what the certificate claims.

Output is ``certs/<hostname>.key`` (RSA, PKCS#8 PEM) and
``certs/<hostname>.crt`` (X.509 PEM, SHA-256, self-signed).
If anything fails, both files are removed before the error propagates:
a half-written pair must never reach the trust store.
"""

from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from vaultdev.core.errors import CertificateError

logger = logging.getLogger(__name__)

PUBLIC_EXPONENT = 65537
KEY_MODE = 0o640
CERT_MODE = 0o644


@dataclass
class CertRequest:
    """What the request config asks for."""

    common_name: str
    dns_names: list[str] = field(default_factory=list)
    key_bits: int = 2048


@dataclass
class CertificateInfo:
    """Inspection result of an existing certificate."""

    common_name: str
    dns_names: list[str]
    key_size: int
    not_before: datetime
    not_after: datetime
    fingerprint_sha256: str

    @property
    def validity_days(self) -> int:
        return (self.not_after - self.not_before).days

    @property
    def expired(self) -> bool:
        return datetime.now(UTC) >= self.not_after

    def to_dict(self) -> dict:
        return {
            "common_name": self.common_name,
            "dns_names": self.dns_names,
            "key_size": self.key_size,
            "not_before": self.not_before.isoformat(),
            "not_after": self.not_after.isoformat(),
            "validity_days": self.validity_days,
            "expired": self.expired,
            "fingerprint_sha256": self.fingerprint_sha256,
        }


def read_request_config(path: Path) -> CertRequest:
    """Parse the OpenSSL request config written by the renderer."""
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    try:
        with path.open(encoding="utf-8") as f:
            parser.read_file(f)
    except (OSError, configparser.Error) as e:
        raise CertificateError(f"Cannot read request config {path}: {e}") from e

    try:
        cn = parser.get("req_distinguished_name", "CN").strip()
    except configparser.Error as e:
        raise CertificateError(f"{path}: missing [req_distinguished_name] CN") from e

    dns_names: list[str] = []
    if parser.has_section("alt_names"):
        dns_names = [
            value.strip()
            for key, value in parser.items("alt_names")
            if key.upper().startswith("DNS.")
        ]

    try:
        bits = parser.getint("req", "default_bits", fallback=2048)
    except ValueError as e:
        raise CertificateError(f"{path}: default_bits is not an integer") from e

    if not cn:
        raise CertificateError(f"{path}: empty common name")
    return CertRequest(common_name=cn, dns_names=dns_names, key_bits=bits)


def generate_certificate(
    conf_path: Path,
    key_path: Path,
    cert_path: Path,
    days: int = 365,
    key_group: int | None = None,
) -> CertificateInfo:
    """Generate a private key and a matching self-signed certificate.

    Args:
        conf_path: Rendered request config.
        key_path: Where to write the private key.
        cert_path: Where to write the certificate.
        days: Validity window starting now.
        key_group: Optional gid given read access to the key (the
            container's service group).

    Raises:
        CertificateError: On any failure; no key/cert is left behind.
    """
    request = read_request_config(conf_path)
    try:
        key = rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=request.key_bits)
        _write_private(key_path, key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ), key_group)
        logger.debug("Wrote %d-bit RSA key to %s", request.key_bits, key_path)

        name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, request.common_name)])
        now = datetime.now(UTC)
        builder = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now)
            .not_valid_after(now + timedelta(days=days))
        )
        if request.dns_names:
            builder = builder.add_extension(
                x509.SubjectAlternativeName([x509.DNSName(n) for n in request.dns_names]),
                critical=False,
            )
        cert = builder.sign(key, hashes.SHA256())

        cert_path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
        os.chmod(cert_path, CERT_MODE)
    except CertificateError:
        _discard(key_path, cert_path)
        raise
    except Exception as e:
        _discard(key_path, cert_path)
        raise CertificateError(f"Certificate generation failed: {e}") from e

    logger.info("Generated self-signed certificate for %s (%d days)", request.common_name, days)
    return describe(cert)


def inspect_certificate(cert_path: Path) -> CertificateInfo:
    """Load a PEM certificate from disk and describe it."""
    try:
        cert = x509.load_pem_x509_certificate(cert_path.read_bytes())
    except (OSError, ValueError) as e:
        raise CertificateError(f"Cannot load certificate {cert_path}: {e}") from e
    return describe(cert)


def describe(cert: x509.Certificate) -> CertificateInfo:
    cn_attrs = cert.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
    try:
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)
        dns_names = san.value.get_values_for_type(x509.DNSName)
    except x509.ExtensionNotFound:
        dns_names = []

    public_key = cert.public_key()
    key_size = public_key.key_size if isinstance(public_key, rsa.RSAPublicKey) else 0

    return CertificateInfo(
        common_name=str(cn_attrs[0].value) if cn_attrs else "",
        dns_names=list(dns_names),
        key_size=key_size,
        not_before=cert.not_valid_before_utc,
        not_after=cert.not_valid_after_utc,
        fingerprint_sha256=cert.fingerprint(hashes.SHA256()).hex(),
    )


def _write_private(path: Path, data: bytes, group: int | None) -> None:
    """Write key material without ever exposing it with loose permissions."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as f:
        f.write(data)
    os.chmod(path, 0o600)
    if group is None:
        return
    try:
        os.chown(path, -1, group)
    except OSError as e:
        logger.warning("Cannot give group %d read access to %s: %s", group, path, e)
        return
    os.chmod(path, KEY_MODE)


def _discard(*paths: Path) -> None:
    for path in paths:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove partial material %s: %s", path, e)
