"""
Add celery-beat schedule for reconciling stale gateway orders.

Runs every 10 minutes and queues a gateway re-check for every record
whose order has sat in CREATED longer than PAYMENT_RECONCILE_AFTER_MINUTES.
"""

from django.db import migrations

TASK_NAME = "Reconcile Stale Payment Orders"


def create_periodic_task(apps, schema_editor):
    """Create the periodic task for reconciling stale orders."""
    IntervalSchedule = apps.get_model("django_celery_beat", "IntervalSchedule")
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    schedule, _ = IntervalSchedule.objects.get_or_create(
        every=10,
        period="minutes",
    )

    PeriodicTask.objects.get_or_create(
        name=TASK_NAME,
        defaults={
            "task": "payments.tasks.reconcile_stale_orders",
            "interval": schedule,
            "enabled": True,
            "description": (
                "Re-checks gateway orders left unconfirmed after a lost webhook "
                "or a verification timeout."
            ),
        },
    )


def remove_periodic_task(apps, schema_editor):
    """Remove the periodic task on migration rollback."""
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    PeriodicTask.objects.filter(name=TASK_NAME).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("payments", "0001_initial"),
        ("django_celery_beat", "0019_alter_periodictasks_options"),
    ]

    operations = [
        migrations.RunPython(create_periodic_task, remove_periodic_task),
    ]
