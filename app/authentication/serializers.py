"""
Serializers for authentication models.
"""

from rest_framework import serializers

from authentication.models import User


class UserSerializer(serializers.ModelSerializer):
    """Current-user representation. Role is read-only."""

    class Meta:
        model = User
        fields = ["id", "email", "username", "full_name", "phone", "role", "date_joined"]
        read_only_fields = ["id", "email", "role", "date_joined"]


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user reference embedded in projects, chats and payments."""

    class Meta:
        model = User
        fields = ["id", "username", "full_name", "role"]
        read_only_fields = fields
