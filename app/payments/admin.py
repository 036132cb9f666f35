"""
Payment admin configuration.

Payment records are read-only in the admin: every state change goes
through PaymentRecordService so fee math and escrow rules are enforced.
"""

from django.contrib import admin

from payments.models import PaymentRecord, WebhookEvent

__all__ = [
    "PaymentRecordAdmin",
    "WebhookEventAdmin",
]


@admin.register(PaymentRecord)
class PaymentRecordAdmin(admin.ModelAdmin):
    """
    Admin configuration for PaymentRecord.

    Provides visibility into collection and escrow status.
    """

    list_display = [
        "id",
        "project",
        "client",
        "freelancer",
        "stage_amount",
        "stage_status",
        "overall_status",
        "release_status",
        "is_admin_management_fee",
        "created_at",
    ]
    list_filter = ["stage_status", "overall_status", "release_status", "is_admin_management_fee", "payment_method"]
    search_fields = ["id", "gateway_order_id", "gateway_payment_id", "moderation_id", "client__email"]
    readonly_fields = [field.name for field in PaymentRecord._meta.fields]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "project", "client", "freelancer", "is_admin_management_fee", "moderation_id"),
            },
        ),
        (
            "Amounts",
            {
                "fields": ("total_amount", "currency", "service_charge", "commission_fee", "stage_amount"),
            },
        ),
        (
            "Collection",
            {
                "fields": (
                    "stage_status",
                    "payment_method",
                    "gateway_order_id",
                    "payment_session_id",
                    "gateway_payment_id",
                    "claimed_paid",
                    "claimed_paid_at",
                    "completed_at",
                    "error_code",
                    "error_message",
                ),
            },
        ),
        (
            "Escrow",
            {
                "fields": ("overall_status", "release_status", "release_amount", "released_at", "refunded_at"),
            },
        ),
        (
            "Metadata",
            {
                "fields": ("raw_gateway_response", "version"),
                "classes": ("collapse",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(WebhookEvent)
class WebhookEventAdmin(admin.ModelAdmin):
    """
    Admin configuration for WebhookEvent.

    Webhook events are immutable once received.
    """

    list_display = [
        "id",
        "event_type",
        "gateway_order_id",
        "status",
        "attempt_count",
        "processed_at",
        "created_at",
    ]
    list_filter = ["status", "event_type", "created_at"]
    search_fields = ["id", "delivery_key", "gateway_order_id", "event_type"]
    readonly_fields = [
        "id",
        "created_at",
        "updated_at",
        "delivery_key",
        "event_type",
        "gateway_order_id",
        "payload",
        "processed_at",
    ]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]
