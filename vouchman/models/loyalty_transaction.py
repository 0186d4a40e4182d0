"""LoyaltyTransaction model - proof that a vouch happened."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class TransactionType(models.TextChoices):
    """Loyalty transaction types."""

    EARN = "earn", _("Vouch earned")


class LoyaltyTransaction(models.Model):
    """
    Immutable record of a completed vouch.

    Created by the minter in the same database transaction that closes
    the attempt. Never updated or deleted; status() reads it as the
    terminal, cached result for the pair.
    """

    customer_id = models.CharField(_("customer"), max_length=64)
    location = models.ForeignKey(
        "vouchman.Location",
        on_delete=models.PROTECT,
        related_name="transactions",
        verbose_name=_("location"),
    )
    business_id = models.CharField(_("business"), max_length=64, db_index=True)

    transaction_type = models.CharField(
        _("type"),
        max_length=20,
        choices=TransactionType.choices,
        default=TransactionType.EARN,
    )
    points_change = models.IntegerField(_("points"), default=1)
    pop_token = models.CharField(
        _("POP token"),
        max_length=64,
        help_text=_("Display code shown to the customer. Not a credential."),
    )

    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)

    class Meta:
        db_table = "vouchman_loyalty_transaction"
        verbose_name = _("loyalty transaction")
        verbose_name_plural = _("loyalty transactions")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["customer_id", "location"],
                condition=models.Q(transaction_type="earn"),
                name="vouchman_unique_earn_per_location",
            ),
        ]
        indexes = [
            models.Index(
                fields=["customer_id", "location", "transaction_type"],
                name="vouchman_tx_pair_idx",
            ),
        ]

    def __str__(self):
        return f"{self.customer_id} @ {self.location_id}: {self.transaction_type} {self.pop_token}"
