"""
Notification service layer.

NotificationService is the sink every workflow writes to. Delivery is
fire-and-forget: notify() never raises into the caller, so a failed
insert cannot undo a payment or commitment transition. The insert runs
in its own savepoint, which keeps an enclosing transaction usable when
it fails.

Usage:
    from notifications.services import NotificationService
    from notifications.models import NotificationKind

    NotificationService.notify(
        user_id=record.freelancer_id,
        kind=NotificationKind.PAYMENT,
        title="Payment received",
        preview=f"{record.total_amount} {record.currency} is held in escrow",
        meta={"payment_id": str(record.id), "project_id": str(record.project_id)},
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.db import DatabaseError, transaction

from core.exceptions import ForbiddenError
from core.services import BaseService
from notifications.models import Notification, NotificationKind

if TYPE_CHECKING:
    from typing import Any

    from authentication.models import User

logger = logging.getLogger(__name__)

META_KEYS = frozenset({"chat_id", "message_id", "project_id", "payment_id", "application_id"})


class NotificationService(BaseService):
    """
    Service for creating and reading in-app notifications.

    Methods:
        notify: Fire-and-forget notification for one user
        list_for_user: Recipient's notifications, optionally unread only
        mark_as_read: Mark one notification read (idempotent)
        mark_all_as_read: Bulk mark the recipient's notifications read
    """

    @classmethod
    def notify(
        cls,
        user_id,
        kind: str,
        title: str,
        preview: str = "",
        meta: dict[str, Any] | None = None,
    ) -> Notification | None:
        """
        Create a notification for ``user_id``.

        Returns the notification, or None when the user id is missing or
        the insert failed. Never raises.
        """
        if user_id is None:
            return None

        clean_meta = {
            key: str(value)
            for key, value in (meta or {}).items()
            if key in META_KEYS and value is not None
        }

        try:
            with transaction.atomic():
                return Notification.objects.create(
                    recipient_id=user_id,
                    kind=kind or NotificationKind.SYSTEM,
                    title=title[:200],
                    preview=preview[:500],
                    meta=clean_meta,
                )
        except DatabaseError:
            logger.exception(
                "Failed to store notification",
                extra={"user_id": str(user_id), "kind": kind},
            )
            return None

    @classmethod
    def list_for_user(cls, user: User, unread_only: bool = False):
        queryset = Notification.objects.filter(recipient=user)
        if unread_only:
            queryset = queryset.filter(is_read=False)
        return queryset

    @classmethod
    def mark_as_read(cls, notification: Notification, user: User) -> Notification:
        """
        Mark a single notification as read.

        Raises:
            ForbiddenError: The user does not own the notification
        """
        if notification.recipient_id != user.id:
            raise ForbiddenError(
                "Cannot mark notification you don't own",
                error_code="NOT_OWNER",
            )

        if not notification.is_read:
            notification.is_read = True
            notification.save(update_fields=["is_read", "updated_at"])

        return notification

    @classmethod
    def mark_all_as_read(cls, user: User) -> int:
        count = Notification.objects.filter(recipient=user, is_read=False).update(is_read=True)
        cls.get_logger().info(f"Marked {count} notifications as read for user {user.id}")
        return count
