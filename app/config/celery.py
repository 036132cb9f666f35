"""
Celery configuration for the marketplace backend.

Background work:
- Reconciling gateway orders that never received a webhook
- Cleaning up processed webhook events

Periodic tasks are stored in the database (django-celery-beat), seeded by
payments migration 0002. Tasks are auto-discovered from installed apps.

Usage:
    from payments.tasks import reconcile_payment_record

    reconcile_payment_record.delay(str(record.id))

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("gigmarket")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
