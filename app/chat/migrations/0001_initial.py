import uuid

import django.db.models.deletion
import django_fsm
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("projects", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Chat",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, help_text="Unique identifier for this record", primary_key=True, serialize=False)),
                ("chat_type", models.CharField(choices=[("individual", "Individual"), ("project", "Project Discussion"), ("group", "Group")], db_index=True, default="individual", max_length=20)),
                ("name", models.CharField(blank=True, default="", max_length=200)),
                ("status", django_fsm.FSMField(choices=[("discussion", "Discussion"), ("committed", "Committed"), ("closed", "Closed")], db_index=True, default="discussion", help_text="Discussion status (managed by FSM)", max_length=20)),
                ("is_locked", models.BooleanField(default=False)),
                ("admin_added", models.BooleanField(default=False)),
                ("last_message_at", models.DateTimeField(blank=True, db_index=True, null=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="chats_created", to=settings.AUTH_USER_MODEL)),
                ("freelancer", models.ForeignKey(blank=True, help_text="Applicant for project discussion chats", null=True, on_delete=django.db.models.deletion.CASCADE, related_name="discussion_chats", to=settings.AUTH_USER_MODEL)),
                ("participants", models.ManyToManyField(blank=True, related_name="chats", to=settings.AUTH_USER_MODEL)),
                ("project", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="chats", to="projects.project")),
            ],
            options={
                "db_table": "chat_chat",
                "ordering": ["-updated_at"],
                "indexes": [models.Index(fields=["project", "status"], name="chat_project_status_idx")],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("status", "committed")), fields=("project",), name="chat_one_committed_per_project"),
                    models.UniqueConstraint(condition=models.Q(("chat_type", "project")), fields=("project", "freelancer"), name="chat_one_discussion_per_freelancer"),
                    models.UniqueConstraint(condition=models.Q(("chat_type", "group")), fields=("project",), name="chat_one_group_per_project"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ChatMessage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("content", models.TextField()),
                ("message_type", models.CharField(choices=[("user", "User"), ("system", "System")], default="user", max_length=10)),
                ("event", models.CharField(blank=True, choices=[("discussion_started", "Discussion Started"), ("freelancer_committed", "Freelancer Committed"), ("discussion_closed", "Discussion Closed"), ("admin_management_enabled", "Admin Management Enabled"), ("user_added", "User Added"), ("user_removed", "User Removed")], default="", max_length=40)),
                ("read", models.BooleanField(default=False)),
                ("chat", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="messages", to="chat.chat")),
                ("sender", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.RESTRICT, related_name="chat_messages", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "chat_message",
                "ordering": ["created_at", "id"],
                "indexes": [models.Index(fields=["chat", "created_at", "id"], name="chat_msg_chat_cursor_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("message_type", "user"), ("sender__isnull", False)),
                            models.Q(("message_type", "system"), ("sender__isnull", True)),
                            _connector="OR",
                        ),
                        name="chat_msg_system_has_no_sender",
                    ),
                ],
            },
        ),
    ]
