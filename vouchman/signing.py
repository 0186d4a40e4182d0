"""
Voucher signer.

A voucher's ``unique_token`` is the hex ECDSA signature over a canonical
JSON payload ``{customer_id, campaign_id, timestamp, nonce}``. Forging a
token needs the private key; the random nonce keeps two vouchers for the
same customer and campaign apart.
"""

import json
import logging
import secrets
import time
from dataclasses import asdict, dataclass

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from vouchman.exceptions import UpstreamFailure
from vouchman.keys import SigningKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoucherPayload:
    """Signed voucher content."""

    customer_id: str
    campaign_id: str
    timestamp: int  # epoch milliseconds
    nonce: str  # hex

    def canonical(self) -> bytes:
        """Sorted-key compact JSON, the exact bytes that get signed."""
        return json.dumps(asdict(self), sort_keys=True, separators=(",", ":")).encode()

    @classmethod
    def from_canonical(cls, serialized: str | bytes) -> "VoucherPayload":
        data = json.loads(serialized)
        return cls(
            customer_id=str(data["customer_id"]),
            campaign_id=str(data["campaign_id"]),
            timestamp=int(data["timestamp"]),
            nonce=str(data["nonce"]),
        )


class VoucherSigner:
    """
    Signs and verifies voucher payloads with the service key.

    Instances are immutable and shared by concurrent requests. The app
    config builds one at startup; see ``get_voucher_signer()``.
    """

    def __init__(self, signing_key: SigningKey, nonce_bytes: int = 8):
        self._key = signing_key
        self._nonce_bytes = nonce_bytes

    @property
    def signing_key(self) -> SigningKey:
        return self._key

    def build_payload(
        self,
        customer_id: str,
        campaign_id,
        timestamp: int | None = None,
        nonce: str | None = None,
    ) -> VoucherPayload:
        """Build a payload with a fresh nonce and the current time."""
        return VoucherPayload(
            customer_id=str(customer_id),
            campaign_id=str(campaign_id),
            timestamp=timestamp if timestamp is not None else int(time.time() * 1000),
            nonce=nonce or secrets.token_hex(self._nonce_bytes),
        )

    def sign(self, payload: VoucherPayload) -> str:
        """
        Sign the canonical payload.

        RFC 6979 nonces make the signature a pure function of key and
        payload.

        Raises:
            UpstreamFailure: If the crypto backend rejects the operation.
        """
        try:
            signature = self._key.private_key.sign(
                payload.canonical(),
                ec.ECDSA(hashes.SHA256(), deterministic_signing=True),
            )
        except Exception as exc:
            raise UpstreamFailure("SIGNING_FAILED", detail=str(exc)) from exc
        return signature.hex()

    def verify(self, serialized_payload: str | bytes, token: str) -> bool:
        """Check that ``token`` is this key's signature over the payload."""
        if isinstance(serialized_payload, str):
            serialized_payload = serialized_payload.encode()
        try:
            self._key.public_key.verify(
                bytes.fromhex(token),
                serialized_payload,
                ec.ECDSA(hashes.SHA256()),
            )
        except (InvalidSignature, ValueError):
            return False
        return True


def get_voucher_signer() -> VoucherSigner:
    """Process-wide signer built by VouchmanConfig.ready()."""
    from django.apps import apps

    return apps.get_app_config("vouchman").voucher_signer
