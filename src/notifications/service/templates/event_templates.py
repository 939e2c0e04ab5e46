"""Templates for event-related notifications."""

from django.utils.translation import gettext as _

from notifications.enums import TemplateId
from notifications.service.templates.base import EmailTemplate
from notifications.service.templates.registry import register_template


class EventCancelledTemplate(EmailTemplate):
    """Template for EVENT_CANCELLED notification (to attendees of a deleted event)."""

    template_id = TemplateId.EVENT_CANCELLED

    def get_subject(self, params: dict[str, str]) -> str:
        """Get email subject."""
        event_name = params.get("eventName")
        if event_name:
            return _("Event Cancelled: %(event)s") % {"event": event_name}
        return _("Event Cancelled")


# Register templates
register_template(EventCancelledTemplate())
