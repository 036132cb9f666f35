import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
import django_fsm
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Project",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, help_text="Unique identifier for this record", primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField()),
                ("category", models.CharField(choices=[("Development", "Development"), ("Design", "Design"), ("Writing", "Writing"), ("Marketing", "Marketing"), ("Video & Animation", "Video & Animation"), ("Audio & Music", "Audio & Music"), ("Business & Consulting", "Business & Consulting"), ("Data & AI", "Data & AI"), ("Support & Admin", "Support & Admin"), ("Other", "Other")], db_index=True, default="Other", max_length=50)),
                ("budget", models.DecimalField(decimal_places=2, default=Decimal("0"), help_text="Budget advertised when the project was posted", max_digits=12)),
                ("final_budget", models.DecimalField(blank=True, decimal_places=2, help_text="Amount agreed when the client committed to a freelancer", max_digits=12, null=True)),
                ("deadline", models.DateField(blank=True, null=True)),
                ("remarks", models.TextField(blank=True, default="")),
                ("status", django_fsm.FSMField(choices=[("unassigned", "Unassigned"), ("pending", "Pending"), ("in-progress", "In Progress"), ("completed", "Completed"), ("cancelled", "Cancelled")], db_index=True, default="unassigned", help_text="Current lifecycle status (managed by FSM)", max_length=20)),
                ("has_requested_admin_management", models.BooleanField(default=False)),
                ("admin_management_requested_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("assigned_to", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="projects_assigned", to=settings.AUTH_USER_MODEL)),
                ("created_by", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="projects_created", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "projects_project",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["created_by", "status"], name="proj_owner_status_idx"),
                    models.Index(fields=["assigned_to", "status"], name="proj_assignee_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("budget__gte", 0)), name="project_budget_non_negative"),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("status__in", ("in-progress", "completed")), ("assigned_to__isnull", False)),
                            models.Q(models.Q(("status__in", ("in-progress", "completed")), _negated=True), ("assigned_to__isnull", True)),
                            _connector="OR",
                        ),
                        name="project_assigned_iff_in_progress_or_completed",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Application",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("expected_payment", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("proposal_summary", models.TextField(blank=True, default="")),
                ("estimated_delivery", models.CharField(blank=True, default="", max_length=100)),
                ("add_ons", models.JSONField(blank=True, default=list)),
                ("applied_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("is_chosen_by_client", models.BooleanField(default=False)),
                ("applicant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="applications", to=settings.AUTH_USER_MODEL)),
                ("project", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="applications", to="projects.project")),
            ],
            options={
                "db_table": "projects_application",
                "ordering": ["-applied_at"],
                "constraints": [models.UniqueConstraint(fields=("project", "applicant"), name="unique_application_per_project")],
            },
        ),
    ]
