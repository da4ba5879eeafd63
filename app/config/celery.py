"""
Celery application.

Background work is limited to outbound e-mail (the public contact form),
so the contact endpoint answers without waiting on SMTP. Redis is both
broker and result backend; tasks are auto-discovered from installed apps.

Usage:
    from authentication.tasks import send_contact_email

    send_contact_email.delay(name=..., email=..., subject=..., message=...)
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("portfolio")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
