"""Vouchman adapter for Django's authentication middleware."""

from __future__ import annotations


class DjangoAuthIdentityVerifier:
    """Adapter: request.user (set by AuthenticationMiddleware) as the verified caller."""

    def verify(self, request) -> str | None:
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            return None
        return str(user.pk)
