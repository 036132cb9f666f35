"""
Project and Application models.

Models:
    Project: A client's job posting and its commitment lifecycle
    Application: A freelancer's bid on a project

Project.status transitions are django-fsm transitions that only change
the in-memory instance. ProjectCommitmentWorkflow persists them with a
conditional UPDATE keyed on the previous status, so two concurrent
requests cannot both move the same project.

State Flow:
    unassigned → pending (client chooses an applicant)
    unassigned/pending → in-progress (client commits to a freelancer)
    in-progress → completed
    unassigned/pending/in-progress → cancelled
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django_fsm import FSMField, transition

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class ProjectStatus(models.TextChoices):
    UNASSIGNED = "unassigned", "Unassigned"
    PENDING = "pending", "Pending"
    IN_PROGRESS = "in-progress", "In Progress"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class ProjectCategory(models.TextChoices):
    DEVELOPMENT = "Development", "Development"
    DESIGN = "Design", "Design"
    WRITING = "Writing", "Writing"
    MARKETING = "Marketing", "Marketing"
    VIDEO_ANIMATION = "Video & Animation", "Video & Animation"
    AUDIO_MUSIC = "Audio & Music", "Audio & Music"
    BUSINESS_CONSULTING = "Business & Consulting", "Business & Consulting"
    DATA_AI = "Data & AI", "Data & AI"
    SUPPORT_ADMIN = "Support & Admin", "Support & Admin"
    OTHER = "Other", "Other"


OPEN_STATUSES = (ProjectStatus.UNASSIGNED, ProjectStatus.PENDING)
ASSIGNED_STATUSES = (ProjectStatus.IN_PROGRESS, ProjectStatus.COMPLETED)


class Project(UUIDPrimaryKeyMixin, BaseModel):
    """
    A project posted by a client.

    Invariants:
        - assigned_to is set iff status is in-progress or completed
        - final_budget is set once the client commits to a freelancer
        - has_requested_admin_management only goes false → true, while
          in-progress and within ADMIN_MANAGEMENT_WINDOW_HOURS of creation

    Fields:
        title/description/category/deadline/remarks: Posting details
        budget: Budget advertised when posting
        final_budget: Amount agreed with the committed freelancer
        status: Lifecycle status (django-fsm)
        created_by: Owning client
        assigned_to: Committed freelancer
        has_requested_admin_management: Admin oversight requested
        admin_management_requested_at: When it was requested
        payment: Main PaymentRecord once created
    """

    title = models.CharField(max_length=200)
    description = models.TextField()
    category = models.CharField(
        max_length=50,
        choices=ProjectCategory.choices,
        default=ProjectCategory.OTHER,
        db_index=True,
    )
    budget = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0"),
        help_text="Budget advertised when the project was posted",
    )
    final_budget = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Amount agreed when the client committed to a freelancer",
    )
    deadline = models.DateField(null=True, blank=True)
    remarks = models.TextField(blank=True, default="")

    status = FSMField(
        max_length=20,
        default=ProjectStatus.UNASSIGNED,
        choices=ProjectStatus.choices,
        db_index=True,
        help_text="Current lifecycle status (managed by FSM)",
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="projects_created",
    )
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="projects_assigned",
    )

    has_requested_admin_management = models.BooleanField(default=False)
    admin_management_requested_at = models.DateTimeField(null=True, blank=True)

    payment = models.ForeignKey(
        "payments.PaymentRecord",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        help_text="Main payment record for this project",
    )

    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "projects_project"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["created_by", "status"], name="proj_owner_status_idx"),
            models.Index(fields=["assigned_to", "status"], name="proj_assignee_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(budget__gte=0),
                name="project_budget_non_negative",
            ),
            models.CheckConstraint(
                condition=(
                    Q(status__in=ASSIGNED_STATUSES, assigned_to__isnull=False)
                    | (~Q(status__in=ASSIGNED_STATUSES) & Q(assigned_to__isnull=True))
                ),
                name="project_assigned_iff_in_progress_or_completed",
            ),
        ]

    def __str__(self) -> str:
        return f"Project({self.title}, {self.status})"

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_STATUSES

    @property
    def committed_budget(self) -> Decimal:
        return self.final_budget if self.final_budget is not None else self.budget

    def admin_management_deadline(self):
        return self.created_at + timedelta(hours=settings.ADMIN_MANAGEMENT_WINDOW_HOURS)

    def within_admin_management_window(self, now=None) -> bool:
        return (now or timezone.now()) <= self.admin_management_deadline()

    # ==========================================================================
    # Transitions
    # ==========================================================================

    @transition(
        field=status,
        source=[ProjectStatus.UNASSIGNED, ProjectStatus.PENDING],
        target=ProjectStatus.PENDING,
    )
    def mark_pending(self):
        """Client picked an applicant to talk terms with."""

    @transition(
        field=status,
        source=[ProjectStatus.UNASSIGNED, ProjectStatus.PENDING],
        target=ProjectStatus.IN_PROGRESS,
    )
    def commit(self, freelancer, final_budget: Decimal):
        """
        Commit to a freelancer.

        Args:
            freelancer: The freelancer the project is assigned to
            final_budget: Amount agreed in the discussion
        """
        self.assigned_to = freelancer
        self.final_budget = final_budget

    @transition(
        field=status,
        source=ProjectStatus.IN_PROGRESS,
        target=ProjectStatus.COMPLETED,
    )
    def complete(self):
        self.completed_at = timezone.now()

    @transition(
        field=status,
        source=[ProjectStatus.UNASSIGNED, ProjectStatus.PENDING, ProjectStatus.IN_PROGRESS],
        target=ProjectStatus.CANCELLED,
    )
    def cancel(self):
        self.assigned_to = None
        self.cancelled_at = timezone.now()


class Application(BaseModel):
    """
    A freelancer's application to a project.

    One application per (project, applicant). Applying also opens the
    discussion chat between the freelancer and the client.

    Fields:
        project: Project applied to
        applicant: Applying freelancer
        expected_payment: Amount the freelancer asks for
        proposal_summary: Pitch
        estimated_delivery: Free-form delivery estimate ("2 weeks")
        add_ons: Optional extras offered, list of strings
        applied_at: When the application was made
        is_chosen_by_client: Client picked this applicant
    """

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="applications",
    )
    applicant = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="applications",
    )
    expected_payment = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    proposal_summary = models.TextField(blank=True, default="")
    estimated_delivery = models.CharField(max_length=100, blank=True, default="")
    add_ons = models.JSONField(default=list, blank=True)
    applied_at = models.DateTimeField(default=timezone.now)
    is_chosen_by_client = models.BooleanField(default=False)

    class Meta:
        db_table = "projects_application"
        ordering = ["-applied_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["project", "applicant"],
                name="unique_application_per_project",
            ),
        ]

    def __str__(self) -> str:
        return f"Application({self.applicant_id} → {self.project_id})"
