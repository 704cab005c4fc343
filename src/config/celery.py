"""
Celery application for the print-shop order backend.

DJANGO_SETTINGS_MODULE is set before the app is instantiated so Celery
reads the Django settings (``CELERY_`` prefix).  Notification tasks live
in ``modules.notifications.tasks`` and are found by autodiscovery.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("printshop")

app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
