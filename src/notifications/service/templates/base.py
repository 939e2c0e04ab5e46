"""Base template interface for notification emails."""

import typing as t
from abc import ABC, abstractmethod

from django.conf import settings
from django.template.loader import render_to_string

from notifications.enums import TemplateId


class Attachment(t.NamedTuple):
    """A file attached to an outgoing email."""

    filename: str
    content: bytes
    mimetype: str


class RenderedEmail(t.NamedTuple):
    """Fully rendered email, ready to hand to the transport."""

    subject: str
    text_body: str
    html_body: str | None
    attachments: list[Attachment]


class EmailTemplate(ABC):
    """Base class for notification email templates.

    Each template must provide a subject. Bodies are rendered from the standard
    structure:
    - notifications/email/{template_id}.txt
    - notifications/email/{template_id}.html

    Template context is ``{"params": params, "app_name": ..., "frontend_base_url": ...}``,
    so templates read values as ``{{ params.eventName }}``.
    """

    template_id: t.ClassVar[TemplateId]

    @abstractmethod
    def get_subject(self, params: dict[str, str]) -> str:
        """Get email subject line.

        Args:
            params: Job parameters

        Returns:
            Email subject string
        """
        pass

    def get_text_body(self, params: dict[str, str]) -> str:
        """Render the plain text body."""
        return render_to_string(f"notifications/email/{self.template_id}.txt", self._get_template_context(params))

    def get_html_body(self, params: dict[str, str]) -> str | None:
        """Render the HTML body."""
        return render_to_string(f"notifications/email/{self.template_id}.html", self._get_template_context(params))

    def get_attachments(self, params: dict[str, str]) -> list[Attachment]:
        """Get email attachments. None by default."""
        return []

    def render(self, params: dict[str, str], subject: str | None = None) -> RenderedEmail:
        """Render subject, bodies and attachments.

        Args:
            params: Job parameters
            subject: Optional subject overriding the template default

        Returns:
            The rendered email
        """
        return RenderedEmail(
            subject=subject or self.get_subject(params),
            text_body=self.get_text_body(params),
            html_body=self.get_html_body(params),
            attachments=self.get_attachments(params),
        )

    def _get_template_context(self, params: dict[str, str]) -> dict[str, t.Any]:
        return {
            "params": params,
            "app_name": params.get("appName") or settings.APP_NAME,
            "frontend_base_url": settings.FRONTEND_BASE_URL,
        }
