"""
Vouchman signals - public event API.

Emitted signals:
- vouch_completed: Emitted by VouchService.stop() after the earn transaction commits
- voucher_issued: Emitted by CampaignService.issue_for_vouch()
- voucher_redeemed: Emitted by RedemptionService.redeem()

All three fire after the write they describe has committed, so they go
through notify(): a failing receiver is logged and never reaches the caller.
"""

import logging

from django.dispatch import Signal

logger = logging.getLogger(__name__)

vouch_completed = Signal()  # sender=LoyaltyTransaction, transaction=LoyaltyTransaction
voucher_issued = Signal()  # sender=CustomerReward, reward=CustomerReward
voucher_redeemed = Signal()  # sender=CustomerReward, reward=CustomerReward


def notify(signal: Signal, sender, **kwargs) -> None:
    """send_robust() and log receiver errors."""
    for receiver, response in signal.send_robust(sender=sender, **kwargs):
        if isinstance(response, Exception):
            logger.error(
                "Signal receiver %r failed for %s",
                receiver,
                sender.__name__,
                exc_info=response,
            )
