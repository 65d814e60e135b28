"""Celery app for background upkeep such as participant counter reconciliation."""

import os

from celery import Celery
from celery.signals import setup_logging

# pytest and local runs set DJANGO_SETTINGS_MODULE themselves.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.production")

app = Celery("campus_events")

# CELERY_* settings, including CELERY_BEAT_SCHEDULE, configure the app.
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


@setup_logging.connect
def use_django_logging(*args, **kwargs):
    """Workers log through ``settings.LOGGING`` rather than Celery's handlers."""
    from logging.config import dictConfig  # noqa: PLC0415

    from django.conf import settings  # noqa: PLC0415

    dictConfig(settings.LOGGING)
