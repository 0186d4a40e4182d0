"""Proof-of-presence minter.

Only called from VouchService.stop(), inside the atomic block that
closes the attempt.
"""

import secrets

from vouchman.conf import vouchman_settings
from vouchman.models import LoyaltyTransaction, TransactionType, VouchAttempt


def mint_pop_token(nbytes: int | None = None) -> str:
    """Short display code: random bytes as upper-case hex."""
    return secrets.token_hex(nbytes or vouchman_settings.POP_TOKEN_BYTES).upper()


def mint_earn_transaction(attempt: VouchAttempt, business_id: str) -> LoyaltyTransaction:
    """
    Record the completed vouch.

    Raises:
        IntegrityError: If the pair already has an earn transaction
    """
    return LoyaltyTransaction.objects.create(
        customer_id=attempt.customer_id,
        location=attempt.location,
        business_id=business_id,
        transaction_type=TransactionType.EARN,
        points_change=vouchman_settings.EARN_POINTS,
        pop_token=mint_pop_token(),
    )
