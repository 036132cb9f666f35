"""
Django admin configuration for notification models.
"""

from django.contrib import admin

from notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """Read-mostly admin for notifications; only the read flag is editable."""

    list_display = ["id", "recipient", "kind", "title", "is_read", "created_at"]
    list_filter = ["kind", "is_read", "created_at"]
    search_fields = ["title", "recipient__email"]
    readonly_fields = ["recipient", "kind", "title", "preview", "meta", "created_at", "updated_at"]
    raw_id_fields = ["recipient"]
