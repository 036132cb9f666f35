"""
Admin configuration for projects.

Status is managed by ProjectCommitmentWorkflow and shown read-only.
"""

from django.contrib import admin

from projects.models import Application, Project


class ApplicationInline(admin.TabularInline):
    model = Application
    extra = 0
    fields = ["applicant", "expected_payment", "estimated_delivery", "is_chosen_by_client", "applied_at"]
    readonly_fields = fields


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "title",
        "category",
        "status",
        "created_by",
        "assigned_to",
        "budget",
        "final_budget",
        "has_requested_admin_management",
        "created_at",
    ]
    list_filter = ["status", "category", "has_requested_admin_management"]
    search_fields = ["id", "title", "created_by__email", "assigned_to__email"]
    readonly_fields = [
        "id",
        "status",
        "assigned_to",
        "final_budget",
        "has_requested_admin_management",
        "admin_management_requested_at",
        "payment",
        "completed_at",
        "cancelled_at",
        "created_at",
        "updated_at",
    ]
    raw_id_fields = ["created_by"]
    ordering = ["-created_at"]
    inlines = [ApplicationInline]


@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    list_display = ["id", "project", "applicant", "expected_payment", "is_chosen_by_client", "applied_at"]
    list_filter = ["is_chosen_by_client"]
    search_fields = ["project__title", "applicant__email"]
    raw_id_fields = ["project", "applicant"]
