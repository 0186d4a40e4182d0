"""Vouchman admin.

Locations and campaigns are editable here. Attempts, transactions and
vouchers are written only by the services, so their admins are read-only.
The one operator write is the "void" action on active vouchers.
"""

from django.contrib import admin
from django.utils.html import format_html

from vouchman.models import (
    Campaign,
    CustomerReward,
    Location,
    LoyaltyTransaction,
    Review,
    RewardStatus,
    VouchAttempt,
)


class ReadOnlyAdminMixin:
    def has_add_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ===========================================
# Inputs
# ===========================================


class CampaignInline(admin.TabularInline):
    model = Campaign
    extra = 0
    fields = ["name", "reward_description", "is_active", "start_date", "end_date"]


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ["name", "owner_id", "dwell_time_minutes", "is_active", "vouch_count"]
    list_filter = ["is_active"]
    search_fields = ["name", "owner_id", "address"]
    readonly_fields = ["id", "created_at"]
    inlines = [CampaignInline]

    def vouch_count(self, obj):
        return obj.transactions.count()

    vouch_count.short_description = "Vouches"


@admin.register(Campaign)
class CampaignAdmin(admin.ModelAdmin):
    list_display = ["name", "owner_id", "location", "reward_description", "is_active", "start_date", "end_date"]
    list_filter = ["is_active"]
    search_fields = ["name", "owner_id", "reward_description"]
    raw_id_fields = ["location"]
    readonly_fields = ["id", "created_at"]
    date_hierarchy = "start_date"


# ===========================================
# Lifecycle (read-only)
# ===========================================


@admin.register(VouchAttempt)
class VouchAttemptAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ["customer_id", "location", "status", "start_time", "completed_at"]
    list_filter = ["status"]
    search_fields = ["customer_id"]
    readonly_fields = ["customer_id", "location", "status", "start_time", "completed_at"]


@admin.register(LoyaltyTransaction)
class LoyaltyTransactionAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ["created_at", "customer_id", "location", "transaction_type", "points_display", "pop_token"]
    list_filter = ["transaction_type"]
    search_fields = ["customer_id", "business_id", "pop_token"]
    readonly_fields = [
        "customer_id",
        "location",
        "business_id",
        "transaction_type",
        "points_change",
        "pop_token",
        "created_at",
    ]
    date_hierarchy = "created_at"

    def points_display(self, obj):
        if obj.points_change > 0:
            return format_html('<span style="color:green">+{}</span>', obj.points_change)
        return format_html('<span style="color:red">{}</span>', obj.points_change)

    points_display.short_description = "Points"


@admin.register(CustomerReward)
class CustomerRewardAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = [
        "created_at",
        "customer_id",
        "reward_description",
        "location",
        "status_badge",
        "token_preview",
        "redeemed_at",
    ]
    list_filter = ["status"]
    search_fields = ["customer_id", "business_id", "unique_token"]
    readonly_fields = [
        "id",
        "customer_id",
        "campaign",
        "business_id",
        "location",
        "reward_description",
        "unique_token",
        "signed_payload",
        "status",
        "created_at",
        "redeemed_at",
    ]
    date_hierarchy = "created_at"
    actions = ["void_selected"]

    @admin.action(description="Void selected active vouchers")
    def void_selected(self, request, queryset):
        # Redeemed vouchers keep their history
        voided = queryset.filter(status=RewardStatus.ACTIVE).update(status=RewardStatus.VOID)
        self.message_user(request, f"{voided} voucher(s) voided.")

    def status_badge(self, obj):
        colors = {
            RewardStatus.ACTIVE: "#28a745",
            RewardStatus.REDEEMED: "#6c757d",
            RewardStatus.VOID: "#dc3545",
        }
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:3px; font-size:11px;">{}</span>',
            colors.get(obj.status, "#6c757d"),
            obj.get_status_display(),
        )

    status_badge.short_description = "Status"


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ["created_at", "location", "customer_id", "rating"]
    list_filter = ["rating"]
    search_fields = ["customer_id", "comment"]
    readonly_fields = ["customer_id", "location", "business_id", "loyalty_transaction", "rating", "created_at"]

    def has_add_permission(self, request):
        return False
