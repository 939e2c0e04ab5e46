"""Email delivery through the Django email framework."""

import structlog
from django.conf import settings
from django.core.mail import EmailMultiAlternatives

from notifications.service.templates.base import RenderedEmail

logger = structlog.get_logger(__name__)


def send_email(recipient: str, email: RenderedEmail) -> None:
    """Send a rendered email to a single recipient.

    Any error raised by the backend (SMTP errors, timeouts, refused connections)
    propagates to the caller, which decides whether to retry.

    Args:
        recipient: Destination address
        email: The rendered email
    """
    email_msg = EmailMultiAlternatives(
        subject=email.subject,
        body=email.text_body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[recipient],
    )

    if email.html_body:
        email_msg.attach_alternative(email.html_body, "text/html")

    for attachment in email.attachments:
        email_msg.attach(attachment.filename, attachment.content, attachment.mimetype)

    email_msg.send(fail_silently=False)

    logger.debug("email_sent", recipient=recipient, subject=email.subject, attachments=len(email.attachments))
