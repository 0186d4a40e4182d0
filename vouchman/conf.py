"""
Vouchman configuration.

Usage in settings.py:
    VOUCHMAN = {
        "SIGNING_PRIVATE_KEY": os.environ["SERVER_PRIVATE_KEY"],
        "DEFAULT_DWELL_TIME_MINUTES": 5,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class VouchmanSettings:
    """Vouchman configuration settings."""

    # Voucher signing key (PEM text, or a path to a PEM file)
    SIGNING_PRIVATE_KEY: str = ""
    SIGNING_PRIVATE_KEY_FILE: str = ""

    # Dwell time used when a location has none configured
    DEFAULT_DWELL_TIME_MINUTES: int = 5

    # Random bytes in POP tokens and voucher payload nonces
    POP_TOKEN_BYTES: int = 4
    NONCE_BYTES: int = 8

    # Points credited by one completed vouch
    EARN_POINTS: int = 1

    # Re-check the voucher signature before honoring a redemption
    VERIFY_SIGNATURE_ON_REDEEM: bool = True

    # Pending attempts older than this are removed by vouchman_cleanup
    ABANDONED_ATTEMPT_HOURS: int = 24

    # Resolves the verified caller id for HTTP views
    IDENTITY_VERIFIER: str = "vouchman.adapters.django_auth.DjangoAuthIdentityVerifier"


def get_vouchman_settings() -> VouchmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "VOUCHMAN", {})
    return VouchmanSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_vouchman_settings(), name)


vouchman_settings = _LazySettings()
