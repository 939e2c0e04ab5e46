"""Template registry for notification emails."""

from notifications.enums import TemplateId
from notifications.exceptions import UnknownTemplateError
from notifications.service.templates.base import EmailTemplate


class TemplateRegistry:
    """Registry for email templates."""

    def __init__(self) -> None:
        """Initialize template registry."""
        self._templates: dict[TemplateId, EmailTemplate] = {}

    def register(self, template: EmailTemplate) -> None:
        """Register a template under its template id.

        Args:
            template: Template instance
        """
        self._templates[template.template_id] = template

    def get(self, template_id: TemplateId | str) -> EmailTemplate:
        """Get template for a template id.

        Args:
            template_id: Template identifier

        Returns:
            Template instance

        Raises:
            UnknownTemplateError: If the id is not a known template or nothing is registered for it
        """
        try:
            template_id = TemplateId(template_id)
        except ValueError as e:
            raise UnknownTemplateError(f"Unknown template: {template_id}") from e

        template = self._templates.get(template_id)
        if not template:
            raise UnknownTemplateError(f"No template registered for {template_id}")
        return template

    def is_registered(self, template_id: TemplateId | str) -> bool:
        """Check if a template is registered."""
        try:
            return TemplateId(template_id) in self._templates
        except ValueError:
            return False


# Global registry instance
_registry = TemplateRegistry()


def register_template(template: EmailTemplate) -> None:
    """Register a template in the global registry."""
    _registry.register(template)


def get_template(template_id: TemplateId | str) -> EmailTemplate:
    """Get an email template from the global registry."""
    return _registry.get(template_id)


def is_template_registered(template_id: TemplateId | str) -> bool:
    """Check if a template is registered in the global registry."""
    return _registry.is_registered(template_id)
