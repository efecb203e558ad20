# gateway/ftp/tls.py
"""
Ephemeral TLS material for implicit FTPS.

The certificate and key only ever live in memory; a new pair is made
each time the server starts.
"""
from datetime import datetime, timedelta, timezone
from typing import Tuple

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID
from OpenSSL import SSL, crypto

DEFAULT_COMMON_NAME = "localhost"
ORGANIZATION = "NextCloud FTP Gateway"


def generate_self_signed_cert(
    common_name: str = DEFAULT_COMMON_NAME,
    valid_days: int = 365
) -> Tuple[x509.Certificate, rsa.RSAPrivateKey]:
    """
    Generate a self-signed server certificate and its private key.

    Args:
        common_name: Subject CN, also added as a DNS subject alternative name
        valid_days: Validity period starting now

    Returns:
        Tuple of (certificate, private_key)
    """
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    name = x509.Name([
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, ORGANIZATION),
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
    ])
    now = datetime.now(timezone.utc)

    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(minutes=5))
        .not_valid_after(now + timedelta(days=valid_days))
        .add_extension(x509.SubjectAlternativeName([x509.DNSName(common_name)]), critical=False)
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )
    return cert, key


def build_ssl_context(cert: x509.Certificate, key: rsa.RSAPrivateKey) -> SSL.Context:
    """Server-side pyOpenSSL context requiring TLS 1.2 or newer."""
    context = SSL.Context(SSL.TLS_SERVER_METHOD)
    context.set_min_proto_version(SSL.TLS1_2_VERSION)
    context.use_certificate(crypto.X509.from_cryptography(cert))
    context.use_privatekey(crypto.PKey.from_cryptography_key(key))
    context.check_privatekey()
    return context
