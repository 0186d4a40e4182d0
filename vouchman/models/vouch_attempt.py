"""
VouchAttempt model - one dwell-time session for (customer, location).

Rules (enforced by the database):
- At most one pending attempt per (customer, location)
"""

from datetime import timedelta

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class VouchAttempt(models.Model):
    """
    Dwell session opened by start() and closed by stop().

    idle -> pending -> completed | failed_duration (-> idle)

    Failed attempts are deleted, which returns the pair to idle.
    Completed attempts stay as history.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        COMPLETED = "completed", _("Completed")
        FAILED_DURATION = "failed_duration", _("Dwell time not met")

    customer_id = models.CharField(_("customer"), max_length=64)
    location = models.ForeignKey(
        "vouchman.Location",
        on_delete=models.CASCADE,
        related_name="vouch_attempts",
        verbose_name=_("location"),
    )
    status = models.CharField(
        _("status"),
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    start_time = models.DateTimeField(_("started at"), default=timezone.now)
    completed_at = models.DateTimeField(_("completed at"), null=True, blank=True)

    class Meta:
        db_table = "vouchman_vouch_attempt"
        verbose_name = _("vouch attempt")
        verbose_name_plural = _("vouch attempts")
        ordering = ["-start_time"]
        constraints = [
            models.UniqueConstraint(
                fields=["customer_id", "location"],
                condition=models.Q(status="pending"),
                name="vouchman_unique_pending_attempt",
            ),
        ]
        indexes = [
            models.Index(fields=["customer_id", "location", "status"], name="vouchman_attempt_pair_idx"),
        ]

    def __str__(self):
        return f"{self.customer_id} @ {self.location_id}: {self.status}"

    @classmethod
    def cleanup_abandoned(cls, hours: int | None = None):
        """Remove pending attempts started more than N hours ago."""
        if hours is None:
            from vouchman.conf import vouchman_settings
            hours = vouchman_settings.ABANDONED_ATTEMPT_HOURS
        cutoff = timezone.now() - timedelta(hours=hours)
        return cls.objects.filter(
            status=cls.Status.PENDING,
            start_time__lt=cutoff,
        ).delete()
