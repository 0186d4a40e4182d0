"""Review model - feedback backed by a proof of presence."""

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class Review(models.Model):
    """
    Customer review of a location.

    Only customers holding the POP token of a completed vouch can review,
    and only once per vouch.
    """

    customer_id = models.CharField(_("customer"), max_length=64, db_index=True)
    location = models.ForeignKey(
        "vouchman.Location",
        on_delete=models.CASCADE,
        related_name="reviews",
        verbose_name=_("location"),
    )
    business_id = models.CharField(_("business"), max_length=64, db_index=True)
    loyalty_transaction = models.OneToOneField(
        "vouchman.LoyaltyTransaction",
        on_delete=models.PROTECT,
        related_name="review",
        verbose_name=_("vouch"),
    )
    rating = models.PositiveSmallIntegerField(
        _("rating"),
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    comment = models.TextField(_("comment"), blank=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        db_table = "vouchman_review"
        verbose_name = _("review")
        verbose_name_plural = _("reviews")
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.rating}/5 @ {self.location_id}"
