"""Templates for subscription notifications."""

from django.utils.translation import gettext as _

from notifications.enums import TemplateId
from notifications.service.templates.base import EmailTemplate
from notifications.service.templates.registry import register_template


class SubscriptionSuccessTemplate(EmailTemplate):
    """Template for SUBSCRIPTION_SUCCESS notification."""

    template_id = TemplateId.SUBSCRIPTION_SUCCESS

    def get_subject(self, params: dict[str, str]) -> str:
        """Get email subject."""
        return _("Subscription Activated")


register_template(SubscriptionSuccessTemplate())
