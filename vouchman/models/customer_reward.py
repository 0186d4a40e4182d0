"""
CustomerReward model - a signed, single-use voucher.

Rules (enforced by the database):
- unique_token is globally unique
- A redeemed voucher always has redeemed_at
"""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class RewardStatus(models.TextChoices):
    ACTIVE = "active", _("Active")
    REDEEMED = "redeemed", _("Redeemed")
    VOID = "void", _("Void")


class CustomerReward(models.Model):
    """
    Voucher issued by a campaign after a completed vouch.

    unique_token is the ECDSA signature over signed_payload and is the
    only thing the customer presents at redemption. The status moves
    active -> redeemed exactly once.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer_id = models.CharField(_("customer"), max_length=64, db_index=True)
    campaign = models.ForeignKey(
        "vouchman.Campaign",
        on_delete=models.PROTECT,
        related_name="rewards",
        verbose_name=_("campaign"),
    )
    business_id = models.CharField(_("business"), max_length=64, db_index=True)
    location = models.ForeignKey(
        "vouchman.Location",
        on_delete=models.PROTECT,
        related_name="rewards",
        verbose_name=_("location"),
    )
    reward_description = models.CharField(_("reward"), max_length=300)

    unique_token = models.CharField(
        _("token"),
        max_length=255,
        unique=True,
        help_text=_("Hex ECDSA signature over the signed payload."),
    )
    signed_payload = models.TextField(_("signed payload"))

    status = models.CharField(
        _("status"),
        max_length=20,
        choices=RewardStatus.choices,
        default=RewardStatus.ACTIVE,
    )
    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)
    redeemed_at = models.DateTimeField(_("redeemed at"), null=True, blank=True)

    class Meta:
        db_table = "vouchman_customer_reward"
        verbose_name = _("customer reward")
        verbose_name_plural = _("customer rewards")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(status="redeemed") | models.Q(redeemed_at__isnull=False),
                name="vouchman_redeemed_has_timestamp",
            ),
        ]

    def __str__(self):
        return f"{self.reward_description} ({self.status}) {self.token_preview}"

    @property
    def token_preview(self) -> str:
        """Shortened token for logs and admin lists."""
        return f"{self.unique_token[:12]}..." if len(self.unique_token) > 12 else self.unique_token

    def redemption_info(self) -> dict:
        return {
            "description": self.reward_description,
            "redeemed_at": self.redeemed_at.isoformat() if self.redeemed_at else None,
        }
