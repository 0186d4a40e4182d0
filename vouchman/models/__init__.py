"""Vouchman models.

Locations and campaigns are inputs managed elsewhere (admin, dashboards).
Attempts, transactions, rewards and reviews are written by the services.
"""

from vouchman.models.location import Location
from vouchman.models.vouch_attempt import VouchAttempt
from vouchman.models.loyalty_transaction import LoyaltyTransaction, TransactionType
from vouchman.models.campaign import Campaign
from vouchman.models.customer_reward import CustomerReward, RewardStatus
from vouchman.models.review import Review

__all__ = [
    # Inputs
    "Location",
    "Campaign",
    # Vouch lifecycle
    "VouchAttempt",
    "LoyaltyTransaction",
    "TransactionType",
    # Vouchers
    "CustomerReward",
    "RewardStatus",
    # POP-verified feedback
    "Review",
]
