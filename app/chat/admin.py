"""
Admin configuration for chat models.

System messages are append-only, so messages are read-only here.
"""

from django.contrib import admin

from chat.models import Chat, ChatMessage


class ChatMessageInline(admin.TabularInline):
    model = ChatMessage
    extra = 0
    fields = ["sender", "message_type", "event", "content", "read", "created_at"]
    readonly_fields = fields
    can_delete = False
    ordering = ["created_at", "id"]

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Chat)
class ChatAdmin(admin.ModelAdmin):
    list_display = ["id", "chat_type", "project", "freelancer", "status", "is_locked", "admin_added", "updated_at"]
    list_filter = ["chat_type", "status", "is_locked", "admin_added"]
    search_fields = ["id", "name", "project__title", "freelancer__email"]
    readonly_fields = ["id", "status", "is_locked", "admin_added", "last_message_at", "created_at", "updated_at"]
    raw_id_fields = ["project", "freelancer", "created_by"]
    filter_horizontal = ["participants"]
    inlines = [ChatMessageInline]


@admin.register(ChatMessage)
class ChatMessageAdmin(admin.ModelAdmin):
    list_display = ["id", "chat", "sender", "message_type", "event", "read", "created_at"]
    list_filter = ["message_type", "event", "read"]
    search_fields = ["content", "sender__email"]
    readonly_fields = ["chat", "sender", "content", "message_type", "event", "created_at", "updated_at"]
