"""Vouchman protocols."""

from vouchman.protocols.identity import IdentityVerifier

__all__ = [
    "IdentityVerifier",
]
