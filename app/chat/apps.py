"""
Chat application configuration.

This app provides project chats with:
- One discussion chat per (project, applicant)
- Discussion status mirrored from the commitment workflow
- Group chats locked under admin management
- Append-only system messages as an audit trail
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"
