"""Identity protocol for resolving the verified caller."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class IdentityVerifier(Protocol):
    """
    Protocol for turning an incoming request into a verified user id.

    Vouchman never checks credentials itself. Token validation belongs to
    the identity provider; the adapter only reports who the caller is.

    Configuration in settings.py:
        VOUCHMAN = {
            "IDENTITY_VERIFIER": "myproject.auth.SupabaseIdentityVerifier",
        }
    """

    def verify(self, request) -> str | None:
        """
        Return the verified user id for the request.

        Args:
            request: Incoming HttpRequest

        Returns:
            Opaque user id, or None when the caller is not authenticated
        """
        ...
