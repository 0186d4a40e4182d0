"""Redemption engine - validate, scope and consume a voucher exactly once."""

import logging

from django.db import DatabaseError, transaction
from django.utils import timezone

from vouchman.conf import vouchman_settings
from vouchman.exceptions import Conflict, InvalidRequest, NotFound, UpstreamFailure, VouchmanError
from vouchman.gates import Gates
from vouchman.models import CustomerReward, RewardStatus
from vouchman.signals import notify, voucher_redeemed
from vouchman.signing import get_voucher_signer

logger = logging.getLogger(__name__)


class RedemptionService:
    """
    Voucher redemption for businesses.

    Nothing is written before the final conditional UPDATE, so any
    failure before it leaves the voucher untouched and the call can be
    retried.
    """

    @classmethod
    def redeem(cls, unique_token: str, business_id: str) -> CustomerReward:
        """
        Redeem a voucher on behalf of the scanning business.

        Args:
            unique_token: Voucher token as scanned
            business_id: Verified id of the redeeming business

        Returns:
            The redeemed CustomerReward

        Raises:
            InvalidRequest: If the token is blank
            NotFound: If no voucher has this token
            Forbidden: If the voucher belongs to another business
            Conflict: If already redeemed (data["reward"] has the original redemption)
            InvalidState: If the voucher is not active or its signature is wrong
            UpstreamFailure: If the data store fails
        """
        if not isinstance(unique_token, str) or not unique_token.strip():
            raise InvalidRequest("MISSING_FIELD", message="Missing voucher token.", field="unique_token")
        unique_token = unique_token.strip()

        reward = cls._get_by_token(unique_token)
        if reward is None:
            raise NotFound("VOUCHER_NOT_FOUND")

        try:
            Gates.voucher_ownership(reward, business_id)
            Gates.voucher_redeemable(reward)
            if vouchman_settings.VERIFY_SIGNATURE_ON_REDEEM:
                Gates.voucher_authenticity(reward, get_voucher_signer())
        except VouchmanError as exc:
            logger.warning("Redemption rejected (%s) for voucher %s by business %s", exc.code, reward.token_preview, business_id)
            raise

        now = timezone.now()
        if not cls._consume(reward, now):
            # Lost the race: another request flipped it after our read
            winner = cls._get_by_token(unique_token)
            raise Conflict("VOUCHER_ALREADY_REDEEMED", reward=winner.redemption_info() if winner else {})

        reward.status = RewardStatus.REDEEMED
        reward.redeemed_at = now
        logger.info("Voucher %s redeemed by business %s", reward.token_preview, business_id)
        notify(voucher_redeemed, CustomerReward, reward=reward)
        return reward

    @classmethod
    def _get_by_token(cls, unique_token: str) -> CustomerReward | None:
        try:
            return CustomerReward.objects.filter(unique_token=unique_token).first()
        except DatabaseError as exc:
            raise UpstreamFailure("STORE_FAILED", detail=str(exc)) from exc

    @classmethod
    def _consume(cls, reward: CustomerReward, now) -> bool:
        """active -> redeemed, only if still active. Returns False if another request won."""
        try:
            with transaction.atomic():
                updated = CustomerReward.objects.filter(
                    pk=reward.pk,
                    status=RewardStatus.ACTIVE,
                ).update(status=RewardStatus.REDEEMED, redeemed_at=now)
        except DatabaseError as exc:
            raise UpstreamFailure("STORE_FAILED", detail=str(exc)) from exc
        return updated == 1
