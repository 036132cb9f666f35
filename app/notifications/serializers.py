"""
Serializers for notification API.
"""

from rest_framework import serializers

from notifications.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    """Read-only notification representation."""

    type = serializers.CharField(source="kind", read_only=True)

    class Meta:
        model = Notification
        fields = ["id", "type", "title", "preview", "meta", "is_read", "created_at"]
        read_only_fields = fields
