"""
Tests for certificate generation and inspection.
"""

import stat
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import serialization

from vaultdev.core.errors import CertificateError
from vaultdev.core.models.settings import VaultSettings
from vaultdev.core.services.certs import (
    generate_certificate,
    inspect_certificate,
    read_request_config,
)
from vaultdev.core.services.render import render_cert_conf


@pytest.fixture
def cert_conf(tmp_path: Path) -> Path:
    path = tmp_path / "vault-cert.conf"
    path.write_text(render_cert_conf(VaultSettings()))
    return path


class TestReadRequestConfig:
    def test_rendered_config(self, cert_conf: Path):
        req = read_request_config(cert_conf)
        assert req.common_name == "vault.example.com"
        assert req.dns_names == ["vault.example.com"]
        assert req.key_bits == 2048

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(CertificateError):
            read_request_config(tmp_path / "missing.conf")

    def test_missing_cn(self, tmp_path: Path):
        path = tmp_path / "bad.conf"
        path.write_text("[req]\ndefault_bits = 2048\n")
        with pytest.raises(CertificateError, match="CN"):
            read_request_config(path)


class TestGenerateCertificate:
    def test_properties(self, cert_conf: Path, tmp_path: Path):
        key_path = tmp_path / "certs" / "vault.example.com.key"
        cert_path = tmp_path / "certs" / "vault.example.com.crt"
        info = generate_certificate(cert_conf, key_path, cert_path)

        assert info.common_name == "vault.example.com"
        assert info.dns_names == ["vault.example.com"]
        assert info.key_size == 2048
        assert info.validity_days == 365
        assert not info.expired

        cert = x509.load_pem_x509_certificate(cert_path.read_bytes())
        assert cert.issuer == cert.subject
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)
        assert san.value.get_values_for_type(x509.DNSName) == ["vault.example.com"]

    def test_key_matches_cert(self, cert_conf: Path, tmp_path: Path):
        key_path = tmp_path / "k.key"
        cert_path = tmp_path / "c.crt"
        generate_certificate(cert_conf, key_path, cert_path)

        key = serialization.load_pem_private_key(key_path.read_bytes(), password=None)
        cert = x509.load_pem_x509_certificate(cert_path.read_bytes())
        assert key.public_key().public_numbers() == cert.public_key().public_numbers()

    def test_key_not_world_readable(self, cert_conf: Path, tmp_path: Path):
        key_path = tmp_path / "k.key"
        generate_certificate(cert_conf, key_path, tmp_path / "c.crt")
        mode = stat.S_IMODE(key_path.stat().st_mode)
        assert mode & stat.S_IROTH == 0
        assert mode & stat.S_IWOTH == 0

    def test_custom_days(self, cert_conf: Path, tmp_path: Path):
        info = generate_certificate(cert_conf, tmp_path / "k.key", tmp_path / "c.crt", days=30)
        assert info.validity_days == 30

    def test_regenerates(self, cert_conf: Path, tmp_path: Path):
        key_path, cert_path = tmp_path / "k.key", tmp_path / "c.crt"
        first = generate_certificate(cert_conf, key_path, cert_path)
        second = generate_certificate(cert_conf, key_path, cert_path)
        assert first.fingerprint_sha256 != second.fingerprint_sha256
        assert inspect_certificate(cert_path).fingerprint_sha256 == second.fingerprint_sha256

    def test_failure_leaves_nothing(self, cert_conf: Path, tmp_path: Path):
        key_path = tmp_path / "k.key"
        cert_path = tmp_path / "missing-dir" / "c.crt"
        with pytest.raises(CertificateError):
            generate_certificate(cert_conf, key_path, cert_path)
        assert not key_path.exists()
        assert not cert_path.exists()

    def test_bad_config_writes_nothing(self, tmp_path: Path):
        conf = tmp_path / "bad.conf"
        conf.write_text("not an ini file")
        key_path = tmp_path / "k.key"
        with pytest.raises(CertificateError):
            generate_certificate(conf, key_path, tmp_path / "c.crt")
        assert not key_path.exists()


class TestInspectCertificate:
    def test_garbage(self, tmp_path: Path):
        path = tmp_path / "c.crt"
        path.write_text("not a cert")
        with pytest.raises(CertificateError):
            inspect_certificate(path)

    def test_to_dict(self, cert_conf: Path, tmp_path: Path):
        generate_certificate(cert_conf, tmp_path / "k.key", tmp_path / "c.crt")
        d = inspect_certificate(tmp_path / "c.crt").to_dict()
        assert d["common_name"] == "vault.example.com"
        assert d["key_size"] == 2048
        assert d["expired"] is False
