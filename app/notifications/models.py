"""
Notification models.

Notifications are in-app records written by the workflows (project,
chat, payments) for the affected user. They are immutable apart from the
read flag.

Models:
    Notification: One notification for one recipient
    NotificationKind: Kind of event the notification describes
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.models import BaseModel


class NotificationKind(models.TextChoices):
    """Event families a notification can describe."""

    MESSAGE = "message", "Message"
    PAYMENT = "payment", "Payment"
    PROJECT = "project", "Project"
    SYSTEM = "system", "System"
    APPLICATION = "application", "Application"


class Notification(BaseModel):
    """
    Individual notification record for a user.

    Fields:
        recipient: User receiving the notification (scopes all queries)
        kind: Event family (message, payment, project, system, application)
        title: Short headline
        preview: One-line body shown in lists
        meta: Ids of the related records (chat_id, message_id, project_id,
              payment_id, application_id) for deep links
        is_read: Whether recipient has read this notification
    """

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        help_text="User receiving this notification",
    )
    kind = models.CharField(
        max_length=20,
        choices=NotificationKind.choices,
        default=NotificationKind.SYSTEM,
    )
    title = models.CharField(max_length=200)
    preview = models.CharField(max_length=500, blank=True, default="")
    meta = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False, db_index=True)

    class Meta:
        db_table = "notifications_notification"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["recipient", "is_read", "-created_at"],
                name="notif_recipient_unread_idx",
            ),
        ]

    def __str__(self) -> str:
        read_status = "read" if self.is_read else "unread"
        return f"Notification({self.kind}) -> User {self.recipient_id} [{read_status}]"
