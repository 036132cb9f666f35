"""
Add celery-beat schedule for pruning processed webhook events.

Runs daily and deletes processed WebhookEvent rows older than 90 days.
Failed deliveries are kept for debugging.
"""

from django.db import migrations

TASK_NAME = "Clean Up Old Webhook Events"


def create_periodic_task(apps, schema_editor):
    """Create the periodic task for pruning processed webhooks."""
    CrontabSchedule = apps.get_model("django_celery_beat", "CrontabSchedule")
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    # Daily at 4 AM UTC
    crontab_daily_4am, _ = CrontabSchedule.objects.get_or_create(
        minute="0",
        hour="4",
        day_of_week="*",
        day_of_month="*",
        month_of_year="*",
    )

    PeriodicTask.objects.get_or_create(
        name=TASK_NAME,
        defaults={
            "task": "payments.tasks.cleanup_old_webhooks",
            "crontab": crontab_daily_4am,
            "enabled": True,
            "description": "Deletes processed webhook events older than 90 days.",
        },
    )


def remove_periodic_task(apps, schema_editor):
    """Remove the periodic task on migration rollback."""
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")
    PeriodicTask.objects.filter(name=TASK_NAME).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("payments", "0002_add_reconcile_schedule"),
        ("django_celery_beat", "0019_alter_periodictasks_options"),
    ]

    operations = [
        migrations.RunPython(create_periodic_task, remove_periodic_task),
    ]
