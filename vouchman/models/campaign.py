"""Campaign model - a business's reward offer."""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class Campaign(models.Model):
    """
    Reward granted for a completed vouch.

    Read-only from Vouchman's point of view. A campaign without a
    location applies to every location of its owner.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner_id = models.CharField(_("business"), max_length=64, db_index=True)
    name = models.CharField(_("name"), max_length=200)
    reward_description = models.CharField(_("reward"), max_length=300)
    location = models.ForeignKey(
        "vouchman.Location",
        on_delete=models.CASCADE,
        related_name="campaigns",
        null=True,
        blank=True,
        verbose_name=_("location"),
        help_text=_("Empty = all locations of the business."),
    )
    is_active = models.BooleanField(_("active"), default=True)
    start_date = models.DateTimeField(_("starts at"))
    end_date = models.DateTimeField(_("ends at"))
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        db_table = "vouchman_campaign"
        verbose_name = _("campaign")
        verbose_name_plural = _("campaigns")
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["owner_id", "is_active", "start_date", "end_date"],
                name="vouchman_campaign_window_idx",
            ),
        ]

    def __str__(self):
        return f"{self.name}: {self.reward_description}"
