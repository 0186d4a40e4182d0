"""Reward wallet - vouchers held by a customer or issued by a business."""

from vouchman.models import CustomerReward


class RewardService:
    """
    Read-only voucher listings.

    Uses @classmethod for extensibility (consistent with other services).
    """

    @classmethod
    def for_customer(
        cls,
        customer_id: str,
        status: str | None = None,
        limit: int = 50,
    ) -> list[CustomerReward]:
        """Vouchers owned by a customer, newest first."""
        qs = CustomerReward.objects.filter(customer_id=customer_id)
        if status:
            qs = qs.filter(status=status)
        return list(qs.select_related("location", "campaign").order_by("-created_at")[:limit])

    @classmethod
    def for_business(
        cls,
        business_id: str,
        status: str | None = None,
        limit: int = 50,
    ) -> list[CustomerReward]:
        """Vouchers issued by a business, newest first."""
        qs = CustomerReward.objects.filter(business_id=business_id)
        if status:
            qs = qs.filter(status=status)
        return list(qs.select_related("location", "campaign").order_by("-created_at")[:limit])

    @staticmethod
    def as_wallet_item(reward: CustomerReward) -> dict:
        """Shape used by the customer's wallet screen (token doubles as QR data)."""
        return {
            "id": str(reward.pk),
            "title": reward.reward_description,
            "location": reward.location.name if reward.location_id else "Any Location",
            "qr_data": reward.unique_token,
            "status": reward.status,
            "created_at": reward.created_at.isoformat(),
        }

    @staticmethod
    def as_issued_item(reward: CustomerReward) -> dict:
        """Shape used by the business dashboard. The token itself is not exposed."""
        return {
            "id": str(reward.pk),
            "customer_id": reward.customer_id,
            "title": reward.reward_description,
            "location": reward.location.name,
            "status": reward.status,
            "created_at": reward.created_at.isoformat(),
            "redeemed_at": reward.redeemed_at.isoformat() if reward.redeemed_at else None,
        }
