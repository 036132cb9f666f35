"""
Serializers for chat API.

Serializer Hierarchy:
    ChatSerializer: Chat with participants and status flags
    ChatMessageSerializer: User or system message
    SendMessageSerializer: Send new message
    ProceedSerializer: Commit to the chat's freelancer
    AddParticipantSerializer: Add a user to a group chat

Design Decisions:
    - Read and write serializers are separate for clarity
    - System messages carry their event tag and no sender
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.serializers import UserSummarySerializer
from chat.models import Chat, ChatMessage
from chat.services import MAX_MESSAGE_LENGTH


class ChatSerializer(serializers.ModelSerializer):
    participants = UserSummarySerializer(many=True, read_only=True)
    freelancer = UserSummarySerializer(read_only=True)
    project_title = serializers.SerializerMethodField()

    class Meta:
        model = Chat
        fields = [
            "id",
            "chat_type",
            "name",
            "project",
            "project_title",
            "freelancer",
            "participants",
            "status",
            "is_locked",
            "admin_added",
            "last_message_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_project_title(self, obj: Chat) -> str | None:
        return obj.project.title if obj.project_id else None


class ChatMessageSerializer(serializers.ModelSerializer):
    sender = UserSummarySerializer(read_only=True)

    class Meta:
        model = ChatMessage
        fields = [
            "id",
            "chat",
            "sender",
            "content",
            "message_type",
            "event",
            "read",
            "created_at",
        ]
        read_only_fields = fields


class SendMessageSerializer(serializers.Serializer):
    content = serializers.CharField(max_length=MAX_MESSAGE_LENGTH)


class ProceedSerializer(serializers.Serializer):
    """Final agreed budget for the freelancer of this discussion."""

    final_budget = serializers.DecimalField(max_digits=12, decimal_places=2)


class AddParticipantSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
