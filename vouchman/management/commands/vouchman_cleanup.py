"""Management command to remove abandoned vouch attempts."""

from django.core.management.base import BaseCommand

from vouchman.models import VouchAttempt


class Command(BaseCommand):
    help = "Remove pending vouch attempts older than ABANDONED_ATTEMPT_HOURS"

    def add_arguments(self, parser):
        parser.add_argument(
            "--hours",
            type=int,
            default=None,
            help="Override ABANDONED_ATTEMPT_HOURS setting",
        )

    def handle(self, *args, **options):
        deleted_count, _ = VouchAttempt.cleanup_abandoned(hours=options["hours"])
        self.stdout.write(
            self.style.SUCCESS(f"Deleted {deleted_count} abandoned vouch attempts.")
        )
