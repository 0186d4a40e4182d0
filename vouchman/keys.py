"""
Voucher signing key management.

The service holds one elliptic-curve key pair. It is loaded once, when
the app registry is ready, and never reloaded while the process runs.

Generate a key for a new deployment:
    python -m vouchman.keys >> .env
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)


DEFAULT_CURVE = ec.SECP256K1


@dataclass(frozen=True)
class SigningKey:
    """Immutable EC key pair used to sign vouchers."""

    private_key: ec.EllipticCurvePrivateKey

    @property
    def public_key(self) -> ec.EllipticCurvePublicKey:
        return self.private_key.public_key()

    @property
    def curve_name(self) -> str:
        return self.private_key.curve.name

    def public_pem(self) -> str:
        """Public half as SubjectPublicKeyInfo PEM."""
        return self.public_key.public_bytes(
            serialization.Encoding.PEM,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode()

    def __repr__(self):
        return f"SigningKey(curve={self.curve_name!r})"


def load_private_key_pem(pem: str | bytes) -> SigningKey:
    """
    Parse a PEM-encoded EC private key.

    Literal ``\\n`` sequences are turned into newlines first, since keys
    kept in ``.env`` files are usually stored on a single line.

    Raises:
        ImproperlyConfigured: If the PEM is empty, unreadable, encrypted,
            or not an elliptic-curve private key.
    """
    if isinstance(pem, bytes):
        pem = pem.decode()
    pem = pem.replace("\\n", "\n").strip()
    if not pem:
        raise ImproperlyConfigured("Voucher signing key is empty.")

    try:
        private_key = serialization.load_pem_private_key(pem.encode(), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise ImproperlyConfigured(f"Voucher signing key is not a readable PEM private key: {exc}") from exc

    if not isinstance(private_key, ec.EllipticCurvePrivateKey):
        raise ImproperlyConfigured(
            "Voucher signing key must be an elliptic-curve private key, "
            f"got {type(private_key).__name__}."
        )

    return SigningKey(private_key=private_key)


def load_signing_key() -> SigningKey:
    """
    Load the signing key named by the VOUCHMAN settings.

    SIGNING_PRIVATE_KEY (PEM text) wins over SIGNING_PRIVATE_KEY_FILE.

    Raises:
        ImproperlyConfigured: If neither setting is present or the key is invalid.
    """
    from vouchman.conf import vouchman_settings

    pem = vouchman_settings.SIGNING_PRIVATE_KEY
    path = vouchman_settings.SIGNING_PRIVATE_KEY_FILE

    if not pem and path:
        try:
            pem = Path(path).read_text()
        except OSError as exc:
            raise ImproperlyConfigured(f"Cannot read voucher signing key file {path!r}: {exc}") from exc

    if not pem:
        raise ImproperlyConfigured(
            "Missing voucher signing key. Set VOUCHMAN['SIGNING_PRIVATE_KEY'] "
            "(generate one with 'python -m vouchman.keys')."
        )

    key = load_private_key_pem(pem)
    logger.info("Loaded voucher signing key (%s)", key.curve_name)
    return key


def generate_private_key_pem(curve: type[ec.EllipticCurve] = DEFAULT_CURVE) -> str:
    """Generate a new EC private key as unencrypted PKCS#8 PEM."""
    private_key = ec.generate_private_key(curve())
    return private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()


def main():
    """Print a fresh key pair as .env lines."""
    private_pem = generate_private_key_pem()
    key = load_private_key_pem(private_pem)
    print("# EC keys for signing vouchers")
    print('SERVER_PRIVATE_KEY="{}"'.format(private_pem.replace("\n", "\\n")))
    print('SERVER_PUBLIC_KEY="{}"'.format(key.public_pem().replace("\n", "\\n")))


if __name__ == "__main__":
    main()
