"""
DRF serializers for projects app.

Usage:
    serializer = ProjectSerializer(project)
    data = serializer.data
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.serializers import UserSummarySerializer
from projects.models import Application, Project, ProjectCategory


class ProjectSerializer(serializers.ModelSerializer):
    """Project representation; lifecycle fields are read-only."""

    created_by = UserSummarySerializer(read_only=True)
    assigned_to = UserSummarySerializer(read_only=True)

    class Meta:
        model = Project
        fields = [
            "id",
            "title",
            "description",
            "category",
            "budget",
            "final_budget",
            "deadline",
            "remarks",
            "status",
            "created_by",
            "assigned_to",
            "has_requested_admin_management",
            "admin_management_requested_at",
            "payment",
            "completed_at",
            "cancelled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProjectWriteSerializer(serializers.Serializer):
    """
    Posting fields accepted on create and update.

    Fields:
        title, description, category, budget, deadline, remarks
    """

    title = serializers.CharField(max_length=200)
    description = serializers.CharField()
    category = serializers.ChoiceField(choices=ProjectCategory.choices, required=False)
    budget = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    deadline = serializers.DateField(required=False, allow_null=True)
    remarks = serializers.CharField(required=False, allow_blank=True)


class ApplicationSerializer(serializers.ModelSerializer):
    applicant = UserSummarySerializer(read_only=True)

    class Meta:
        model = Application
        fields = [
            "id",
            "project",
            "applicant",
            "expected_payment",
            "proposal_summary",
            "estimated_delivery",
            "add_ons",
            "applied_at",
            "is_chosen_by_client",
        ]
        read_only_fields = fields


class ApplySerializer(serializers.Serializer):
    expected_payment = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True,
    )
    proposal_summary = serializers.CharField(required=False, allow_blank=True)
    estimated_delivery = serializers.CharField(max_length=100, required=False, allow_blank=True)
    add_ons = serializers.ListField(child=serializers.CharField(max_length=200), required=False)


class ChooseApplicantSerializer(serializers.Serializer):
    application_id = serializers.IntegerField()
