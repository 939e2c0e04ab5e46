class NotificationEnqueueError(Exception):
    """Raised when a notification job could not be accepted into the durable queue."""


class UnknownTemplateError(ValueError):
    """Raised when a job references a template that is not registered."""
