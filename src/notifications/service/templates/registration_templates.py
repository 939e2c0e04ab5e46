"""Templates for registration notifications."""

from django.utils.translation import gettext as _

from events.service.qr_tokens import render_qr_png
from notifications.enums import TemplateId
from notifications.service.templates.base import Attachment, EmailTemplate
from notifications.service.templates.registry import register_template


class RegistrationAcceptedTemplate(EmailTemplate):
    """Template for REGISTRATION_ACCEPTED notification.

    When the job carries a ``qrCode`` parameter the ticket QR code is attached as a PNG.
    """

    template_id = TemplateId.REGISTRATION_ACCEPTED

    def get_subject(self, params: dict[str, str]) -> str:
        """Get email subject."""
        return _("Your Event Registration is Accepted")

    def get_attachments(self, params: dict[str, str]) -> list[Attachment]:
        """Attach the check-in QR code."""
        qr_code = params.get("qrCode")
        if not qr_code:
            return []
        return [Attachment(filename="qr.png", content=render_qr_png(qr_code), mimetype="image/png")]


class RegistrationCancelledTemplate(EmailTemplate):
    """Template for REGISTRATION_CANCELLED notification."""

    template_id = TemplateId.REGISTRATION_CANCELLED

    def get_subject(self, params: dict[str, str]) -> str:
        """Get email subject."""
        event_name = params.get("eventName")
        if event_name:
            return _("Registration Cancelled: %(event)s") % {"event": event_name}
        return _("Registration Cancelled")


# Register templates
register_template(RegistrationAcceptedTemplate())
register_template(RegistrationCancelledTemplate())
