# Generated migration for the vouch lifecycle models

import uuid

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Location",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "owner_id",
                    models.CharField(
                        db_index=True,
                        help_text="Verified user id of the owning business.",
                        max_length=64,
                        verbose_name="business",
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("address", models.CharField(blank=True, max_length=300, verbose_name="address")),
                (
                    "dwell_time_minutes",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Minimum stay for a vouch. Empty uses the default.",
                        null=True,
                        verbose_name="dwell time (minutes)",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
            ],
            options={
                "verbose_name": "location",
                "verbose_name_plural": "locations",
                "db_table": "vouchman_location",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Campaign",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("owner_id", models.CharField(db_index=True, max_length=64, verbose_name="business")),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("reward_description", models.CharField(max_length=300, verbose_name="reward")),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("start_date", models.DateTimeField(verbose_name="starts at")),
                ("end_date", models.DateTimeField(verbose_name="ends at")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                (
                    "location",
                    models.ForeignKey(
                        blank=True,
                        help_text="Empty = all locations of the business.",
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="campaigns",
                        to="vouchman.location",
                        verbose_name="location",
                    ),
                ),
            ],
            options={
                "verbose_name": "campaign",
                "verbose_name_plural": "campaigns",
                "db_table": "vouchman_campaign",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["owner_id", "is_active", "start_date", "end_date"],
                        name="vouchman_campaign_window_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="VouchAttempt",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("customer_id", models.CharField(max_length=64, verbose_name="customer")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("completed", "Completed"),
                            ("failed_duration", "Dwell time not met"),
                        ],
                        default="pending",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                (
                    "start_time",
                    models.DateTimeField(default=django.utils.timezone.now, verbose_name="started at"),
                ),
                ("completed_at", models.DateTimeField(blank=True, null=True, verbose_name="completed at")),
                (
                    "location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="vouch_attempts",
                        to="vouchman.location",
                        verbose_name="location",
                    ),
                ),
            ],
            options={
                "verbose_name": "vouch attempt",
                "verbose_name_plural": "vouch attempts",
                "db_table": "vouchman_vouch_attempt",
                "ordering": ["-start_time"],
                "indexes": [
                    models.Index(
                        fields=["customer_id", "location", "status"],
                        name="vouchman_attempt_pair_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(status="pending"),
                        fields=("customer_id", "location"),
                        name="vouchman_unique_pending_attempt",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="LoyaltyTransaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("customer_id", models.CharField(max_length=64, verbose_name="customer")),
                ("business_id", models.CharField(db_index=True, max_length=64, verbose_name="business")),
                (
                    "transaction_type",
                    models.CharField(
                        choices=[("earn", "Vouch earned")],
                        default="earn",
                        max_length=20,
                        verbose_name="type",
                    ),
                ),
                ("points_change", models.IntegerField(default=1, verbose_name="points")),
                (
                    "pop_token",
                    models.CharField(
                        help_text="Display code shown to the customer. Not a credential.",
                        max_length=64,
                        verbose_name="POP token",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                (
                    "location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="vouchman.location",
                        verbose_name="location",
                    ),
                ),
            ],
            options={
                "verbose_name": "loyalty transaction",
                "verbose_name_plural": "loyalty transactions",
                "db_table": "vouchman_loyalty_transaction",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["customer_id", "location", "transaction_type"],
                        name="vouchman_tx_pair_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(transaction_type="earn"),
                        fields=("customer_id", "location"),
                        name="vouchman_unique_earn_per_location",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CustomerReward",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("customer_id", models.CharField(db_index=True, max_length=64, verbose_name="customer")),
                ("business_id", models.CharField(db_index=True, max_length=64, verbose_name="business")),
                ("reward_description", models.CharField(max_length=300, verbose_name="reward")),
                (
                    "unique_token",
                    models.CharField(
                        help_text="Hex ECDSA signature over the signed payload.",
                        max_length=255,
                        unique=True,
                        verbose_name="token",
                    ),
                ),
                ("signed_payload", models.TextField(verbose_name="signed payload")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("active", "Active"),
                            ("redeemed", "Redeemed"),
                            ("void", "Void"),
                        ],
                        default="active",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("redeemed_at", models.DateTimeField(blank=True, null=True, verbose_name="redeemed at")),
                (
                    "campaign",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="rewards",
                        to="vouchman.campaign",
                        verbose_name="campaign",
                    ),
                ),
                (
                    "location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="rewards",
                        to="vouchman.location",
                        verbose_name="location",
                    ),
                ),
            ],
            options={
                "verbose_name": "customer reward",
                "verbose_name_plural": "customer rewards",
                "db_table": "vouchman_customer_reward",
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("status", "redeemed"), _negated=True),
                            ("redeemed_at__isnull", False),
                            _connector="OR",
                        ),
                        name="vouchman_redeemed_has_timestamp",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Review",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("customer_id", models.CharField(db_index=True, max_length=64, verbose_name="customer")),
                ("business_id", models.CharField(db_index=True, max_length=64, verbose_name="business")),
                (
                    "rating",
                    models.PositiveSmallIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(5),
                        ],
                        verbose_name="rating",
                    ),
                ),
                ("comment", models.TextField(blank=True, verbose_name="comment")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                (
                    "location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reviews",
                        to="vouchman.location",
                        verbose_name="location",
                    ),
                ),
                (
                    "loyalty_transaction",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="review",
                        to="vouchman.loyaltytransaction",
                        verbose_name="vouch",
                    ),
                ),
            ],
            options={
                "verbose_name": "review",
                "verbose_name_plural": "reviews",
                "db_table": "vouchman_review",
                "ordering": ["-created_at"],
            },
        ),
    ]
