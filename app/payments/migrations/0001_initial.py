import uuid
from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("projects", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="WebhookEvent",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, help_text="Unique identifier for this record", primary_key=True, serialize=False)),
                ("delivery_key", models.CharField(help_text="sha256(timestamp + raw body) - unique constraint for idempotency", max_length=64, unique=True)),
                ("event_type", models.CharField(db_index=True, max_length=100)),
                ("gateway_order_id", models.CharField(blank=True, db_index=True, default="", max_length=64)),
                ("payload", models.JSONField()),
                ("status", models.CharField(choices=[("pending", "Pending"), ("processing", "Processing"), ("processed", "Processed"), ("failed", "Failed")], db_index=True, default="pending", max_length=20)),
                ("processed_at", models.DateTimeField(blank=True, null=True)),
                ("error_message", models.TextField(blank=True, null=True)),
                ("attempt_count", models.PositiveSmallIntegerField(default=0)),
            ],
            options={
                "verbose_name": "Webhook Event",
                "verbose_name_plural": "Webhook Events",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["status", "created_at"], name="payments_we_status_3c1f0a_idx")],
            },
        ),
        migrations.CreateModel(
            name="PaymentRecord",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, help_text="Unique identifier for this record", primary_key=True, serialize=False)),
                ("total_amount", models.DecimalField(decimal_places=2, help_text="Base amount agreed for the project", max_digits=12)),
                ("currency", models.CharField(default="INR", max_length=3)),
                ("service_charge", models.DecimalField(decimal_places=2, default=Decimal("0"), help_text="Charged to the client on top of total_amount (admin-managed projects)", max_digits=12)),
                ("commission_fee", models.DecimalField(decimal_places=2, default=Decimal("0"), help_text="Deducted from the freelancer's share at release", max_digits=12)),
                ("stage_amount", models.DecimalField(decimal_places=2, help_text="Amount collected from the client (total_amount + service_charge)", max_digits=12)),
                ("stage_status", models.CharField(choices=[("pending", "Pending"), ("created", "Order Created"), ("paid", "Paid"), ("failed", "Failed")], db_index=True, default="pending", max_length=20)),
                ("gateway_order_id", models.CharField(blank=True, help_text="Order id minted at the gateway; the last order created wins", max_length=64, null=True, unique=True)),
                ("payment_session_id", models.CharField(blank=True, max_length=255, null=True)),
                ("gateway_payment_id", models.CharField(blank=True, max_length=64, null=True)),
                ("gateway_signature", models.CharField(blank=True, max_length=255, null=True)),
                ("payment_method", models.CharField(blank=True, choices=[("gateway", "Payment Gateway"), ("upi", "UPI (manual)")], max_length=20, null=True)),
                ("claimed_paid", models.BooleanField(default=False, help_text="Client declared a manual (UPI) payment as sent")),
                ("claimed_paid_at", models.DateTimeField(blank=True, null=True)),
                ("error_code", models.CharField(blank=True, max_length=100, null=True)),
                ("error_message", models.CharField(blank=True, max_length=500, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("customer_name", models.CharField(blank=True, default="", max_length=150)),
                ("customer_email", models.EmailField(blank=True, default="", max_length=254)),
                ("customer_phone", models.CharField(blank=True, default="", max_length=20)),
                ("overall_status", models.CharField(choices=[("pending", "Pending"), ("advance_paid", "Advance Paid"), ("final_paid", "Final Paid"), ("released", "Released"), ("refunded", "Refunded"), ("failed", "Failed")], db_index=True, default="pending", max_length=20)),
                ("release_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("release_status", models.CharField(choices=[("not_released", "Not Released"), ("released", "Released"), ("refunded", "Refunded")], default="not_released", max_length=20)),
                ("released_at", models.DateTimeField(blank=True, null=True)),
                ("refunded_at", models.DateTimeField(blank=True, null=True)),
                ("is_admin_management_fee", models.BooleanField(default=False)),
                ("moderation_id", models.CharField(blank=True, help_text="MOD-xxxxx reference for manual reconciliation of fee payments", max_length=16, null=True, unique=True)),
                ("raw_gateway_response", models.JSONField(blank=True, default=dict, help_text="Last gateway payload applied to this record")),
                ("version", models.PositiveIntegerField(default=1, help_text="Version for optimistic locking - incremented on each transition")),
                ("client", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payments_as_client", to=settings.AUTH_USER_MODEL)),
                ("freelancer", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="payments_as_freelancer", to=settings.AUTH_USER_MODEL)),
                ("project", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payment_records", to="projects.project")),
            ],
            options={
                "verbose_name": "Payment Record",
                "verbose_name_plural": "Payment Records",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["client", "created_at"], name="payments_pa_client__8d2e41_idx"),
                    models.Index(fields=["freelancer", "created_at"], name="payments_pa_freelan_5b7c90_idx"),
                    models.Index(fields=["stage_status", "updated_at"], name="payments_pa_stage_s_a41e6d_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("is_admin_management_fee", False)), fields=("project",), name="payment_one_main_record_per_project"),
                    models.CheckConstraint(condition=models.Q(("is_admin_management_fee", True), ("freelancer__isnull", False), _connector="OR"), name="payment_freelancer_required_for_main_record"),
                    models.CheckConstraint(condition=models.Q(models.Q(("is_admin_management_fee", True), ("moderation_id__isnull", False)), models.Q(("is_admin_management_fee", False), ("moderation_id__isnull", True)), _connector="OR"), name="payment_moderation_id_iff_fee"),
                    models.CheckConstraint(condition=models.Q(("total_amount__gt", 0)), name="payment_total_amount_positive"),
                ],
            },
        ),
    ]
