"""
Notifications app for in-app notifications.

This app provides:
- Notification model for storing user notifications
- NotificationService, the fire-and-forget sink used by workflows
- REST API for listing and marking notifications read

Usage:
    from notifications.models import NotificationKind
    from notifications.services import NotificationService

    NotificationService.notify(
        user_id=chat.client_id,
        kind=NotificationKind.MESSAGE,
        title=f"New message from {sender}",
        preview=message.content[:100],
        meta={"chat_id": str(chat.id), "message_id": str(message.id)},
    )
"""
