"""
Chat system models.

This module defines the data models for project discussions:
- Individual (1:1) chats between two users
- Project discussion chats, one per (project, freelancer), opened on apply
- Group chats for a project, used once admin management is requested

Models:
    Chat: Container for messages between participants
    ChatMessage: User message or immutable system event in a chat

Design Decisions:
    - Chat.status mirrors the commitment workflow: the chosen discussion
      becomes committed, its siblings closed, and neither is ever reopened
    - Locking is driven by admin-management escalation only; closing a
      chat never unlocks it
    - System messages are append-only audit entries, ordered with user
      messages by creation time
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.db import models
from django.db.models import Q
from django_fsm import FSMField, transition

from core.exceptions import ValidationError
from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel

if TYPE_CHECKING:
    from authentication.models import User


class ChatType(models.TextChoices):
    """
    Type of chat.

    INDIVIDUAL: Two users, no project
    PROJECT: Discussion between a project's client and one applicant
    GROUP: Project group chat, membership managed by admins
    """

    INDIVIDUAL = "individual", "Individual"
    PROJECT = "project", "Project Discussion"
    GROUP = "group", "Group"


class ChatStatus(models.TextChoices):
    DISCUSSION = "discussion", "Discussion"
    COMMITTED = "committed", "Committed"
    CLOSED = "closed", "Closed"


class MessageType(models.TextChoices):
    """
    USER: Authored by a participant
    SYSTEM: Generated by a workflow transition (sender is NULL)
    """

    USER = "user", "User"
    SYSTEM = "system", "System"


class SystemEvent(models.TextChoices):
    """
    System message event tags.

    Events:
        DISCUSSION_STARTED: Freelancer applied, discussion opened
        FREELANCER_COMMITTED: Client committed to this chat's freelancer
        DISCUSSION_CLOSED: Client committed to another freelancer
        ADMIN_MANAGEMENT_ENABLED: Project moved under admin management
        USER_ADDED: Someone joined the chat
        USER_REMOVED: Someone was removed from the chat
    """

    DISCUSSION_STARTED = "discussion_started", "Discussion Started"
    FREELANCER_COMMITTED = "freelancer_committed", "Freelancer Committed"
    DISCUSSION_CLOSED = "discussion_closed", "Discussion Closed"
    ADMIN_MANAGEMENT_ENABLED = "admin_management_enabled", "Admin Management Enabled"
    USER_ADDED = "user_added", "User Added"
    USER_REMOVED = "user_removed", "User Removed"


class Chat(UUIDPrimaryKeyMixin, BaseModel):
    """
    A chat between two or more users.

    Status transitions (django-fsm, in memory only; ChatStatusSync
    persists them with conditional updates):
        discussion → committed (exactly one per project)
        discussion → closed (a sibling was committed)

    Fields:
        chat_type: individual, project or group
        name: Display name for group chats
        project: Project this chat belongs to (NULL for individual chats)
        freelancer: Applicant of a project discussion chat
        participants: Users in the chat
        status: Discussion status
        is_locked: Only admins may send while locked
        admin_added: An admin has joined
        created_by: User who opened the chat
        last_message_at: Timestamp of most recent message (for sorting)
    """

    chat_type = models.CharField(
        max_length=20,
        choices=ChatType.choices,
        default=ChatType.INDIVIDUAL,
        db_index=True,
    )
    name = models.CharField(max_length=200, blank=True, default="")
    project = models.ForeignKey(
        "projects.Project",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="chats",
    )
    freelancer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="discussion_chats",
        help_text="Applicant for project discussion chats",
    )
    participants = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name="chats",
        blank=True,
    )

    status = FSMField(
        max_length=20,
        default=ChatStatus.DISCUSSION,
        choices=ChatStatus.choices,
        db_index=True,
        help_text="Discussion status (managed by FSM)",
    )
    is_locked = models.BooleanField(default=False)
    admin_added = models.BooleanField(default=False)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="chats_created",
    )
    last_message_at = models.DateTimeField(null=True, blank=True, db_index=True)

    class Meta:
        db_table = "chat_chat"
        ordering = ["-updated_at"]
        indexes = [
            models.Index(fields=["project", "status"], name="chat_project_status_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["project"],
                condition=Q(status="committed"),
                name="chat_one_committed_per_project",
            ),
            models.UniqueConstraint(
                fields=["project", "freelancer"],
                condition=Q(chat_type="project"),
                name="chat_one_discussion_per_freelancer",
            ),
            models.UniqueConstraint(
                fields=["project"],
                condition=Q(chat_type="group"),
                name="chat_one_group_per_project",
            ),
        ]

    def __str__(self) -> str:
        return f"Chat({self.chat_type}, {self.status})"

    def has_participant(self, user: User) -> bool:
        return self.participants.filter(pk=user.pk).exists()

    @transition(field=status, source=ChatStatus.DISCUSSION, target=ChatStatus.COMMITTED)
    def commit(self):
        """This chat's freelancer was chosen for the project."""

    @transition(field=status, source=ChatStatus.DISCUSSION, target=ChatStatus.CLOSED)
    def close(self):
        """Another chat for the same project was committed."""


class ChatMessage(BaseModel):
    """
    A message within a chat.

    System messages have no sender, carry an event tag and cannot be
    edited once written.

    Fields:
        chat: Chat this message belongs to
        sender: Author (NULL for system messages)
        content: Message text
        message_type: user or system
        event: System event tag (blank for user messages)
        read: Read by the other participants
    """

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name="messages",
    )
    # Messages go with their chat; a sender cannot be deleted out from under them
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.RESTRICT,
        null=True,
        blank=True,
        related_name="chat_messages",
    )
    content = models.TextField()
    message_type = models.CharField(
        max_length=10,
        choices=MessageType.choices,
        default=MessageType.USER,
    )
    event = models.CharField(
        max_length=40,
        choices=SystemEvent.choices,
        blank=True,
        default="",
    )
    read = models.BooleanField(default=False)

    class Meta:
        db_table = "chat_message"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["chat", "created_at", "id"], name="chat_msg_chat_cursor_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(message_type="user", sender__isnull=False) | Q(message_type="system", sender__isnull=True),
                name="chat_msg_system_has_no_sender",
            ),
        ]

    def __str__(self) -> str:
        sender_str = f"User {self.sender_id}" if self.sender_id else "System"
        content_preview = self.content[:50] + "..." if len(self.content) > 50 else self.content
        return f"{sender_str}: {content_preview}"

    @property
    def is_system_message(self) -> bool:
        return self.message_type == MessageType.SYSTEM

    def save(self, *args, **kwargs):
        if self.is_system_message and not self._state.adding:
            raise ValidationError(
                "System messages cannot be edited",
                error_code="SYSTEM_MESSAGE_IMMUTABLE",
            )
        super().save(*args, **kwargs)
