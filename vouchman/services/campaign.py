"""Campaign eligibility and voucher issuance."""

import logging
from datetime import datetime

from django.db import DatabaseError, transaction
from django.db.models import F, Q
from django.utils import timezone

from vouchman.exceptions import UpstreamFailure
from vouchman.models import Campaign, CustomerReward, Location, RewardStatus
from vouchman.signals import notify, voucher_issued
from vouchman.signing import get_voucher_signer

logger = logging.getLogger(__name__)


class CampaignService:
    """
    Picks the campaign a completed vouch qualifies for and issues its voucher.

    At most one voucher per vouch event, no matter how many campaigns match.
    """

    @classmethod
    def find_applicable(
        cls,
        business_id: str,
        location_id,
        now: datetime | None = None,
    ) -> Campaign | None:
        """
        First active campaign of the business covering this location right now.

        Order: location-specific before business-wide, then oldest first,
        then id. The order is total so the choice is deterministic.
        """
        now = now or timezone.now()
        return (
            Campaign.objects.filter(
                owner_id=business_id,
                is_active=True,
                start_date__lte=now,
                end_date__gte=now,
            )
            .filter(Q(location_id=location_id) | Q(location__isnull=True))
            .order_by(F("location").asc(nulls_last=True), "created_at", "id")
            .first()
        )

    @classmethod
    def issue_for_vouch(
        cls,
        customer_id: str,
        location: Location,
        business_id: str,
    ) -> CustomerReward | None:
        """
        Issue a signed voucher for a completed vouch.

        Args:
            customer_id: Verified customer id
            location: Location where the vouch happened
            business_id: Owner of the location

        Returns:
            Created CustomerReward, or None when no campaign applies

        Raises:
            UpstreamFailure: If signing or the insert fails
        """
        logger.info("Checking campaigns for customer %s at location %s", customer_id, location.pk)

        try:
            campaign = cls.find_applicable(business_id, location.pk)
        except DatabaseError as exc:
            raise UpstreamFailure("STORE_FAILED", detail=str(exc)) from exc

        if campaign is None:
            logger.info("No active campaign for business %s at location %s", business_id, location.pk)
            return None

        signer = get_voucher_signer()
        payload = signer.build_payload(customer_id, campaign.pk)
        unique_token = signer.sign(payload)

        try:
            with transaction.atomic():
                reward = CustomerReward.objects.create(
                    customer_id=customer_id,
                    campaign=campaign,
                    business_id=campaign.owner_id,
                    location=location,
                    reward_description=campaign.reward_description,
                    unique_token=unique_token,
                    signed_payload=payload.canonical().decode(),
                    status=RewardStatus.ACTIVE,
                )
        except DatabaseError as exc:
            raise UpstreamFailure("STORE_FAILED", detail=str(exc)) from exc

        logger.info(
            "Issued voucher %s (campaign %s) to customer %s",
            reward.token_preview,
            campaign.pk,
            customer_id,
        )
        notify(voucher_issued, CustomerReward, reward=reward)
        return reward

