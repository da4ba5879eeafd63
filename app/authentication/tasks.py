"""
Celery tasks for authentication.

Usage:
    from authentication.tasks import send_contact_email
    send_contact_email.delay(name="Ada", email="ada@example.com",
                             subject="Hi", message="...")
"""

import logging
from smtplib import SMTPException

from celery import shared_task
from django.conf import settings
from django.core.mail import EmailMessage

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(SMTPException, ConnectionError),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def send_contact_email(self, name: str, email: str, subject: str, message: str) -> bool:
    """
    Forward a contact form submission to the site owner.

    The sender's address goes in Reply-To so the owner can answer directly.

    Returns:
        True once the message was handed to the e-mail backend
    """
    body = f"From: {name} <{email}>\n\n{message}"
    EmailMessage(
        subject=f"[Contact] {subject}",
        body=body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[settings.CONTACT_EMAIL],
        reply_to=[email],
    ).send(fail_silently=False)

    logger.info(f"Contact email from {email} delivered to backend")
    return True
