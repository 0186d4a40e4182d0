"""Location model - a geofenced place owned by a business."""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class Location(models.Model):
    """
    Business location customers can vouch for.

    Managed outside Vouchman (admin, business dashboard). The geofence
    itself is evaluated by the client; only the dwell requirement and
    the owning business matter here.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner_id = models.CharField(
        _("business"),
        max_length=64,
        db_index=True,
        help_text=_("Verified user id of the owning business."),
    )
    name = models.CharField(_("name"), max_length=200)
    address = models.CharField(_("address"), max_length=300, blank=True)
    dwell_time_minutes = models.PositiveIntegerField(
        _("dwell time (minutes)"),
        null=True,
        blank=True,
        help_text=_("Minimum stay for a vouch. Empty uses the default."),
    )
    is_active = models.BooleanField(_("active"), default=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        db_table = "vouchman_location"
        verbose_name = _("location")
        verbose_name_plural = _("locations")
        ordering = ["name"]

    def __str__(self):
        return self.name
