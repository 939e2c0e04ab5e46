"""Enums for the notification system."""

from django.db.models import TextChoices


class TemplateId(TextChoices):
    """Email templates a notification job can render.

    Values are the wire identifiers shared by producers and workers.
    """

    REGISTRATION_ACCEPTED = "REGISTRATION_ACCEPTED"
    REGISTRATION_CANCELLED = "REGISTRATION_CANCELLED"
    EVENT_CANCELLED = "EVENT_CANCELLED"
    SUBSCRIPTION_SUCCESS = "SUBSCRIPTION_SUCCESS"


class JobStatus(TextChoices):
    """Lifecycle of a notification job.

    pending -> in_flight -> delivered | pending (retry) | failed (dead letter)
    """

    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    DELIVERED = "delivered"
    FAILED = "failed"


class JobOutcome(TextChoices):
    """Result of a single worker pass over a job."""

    DELIVERED = "delivered"
    RETRY = "retry"
    FAILED = "failed"
    SKIPPED = "skipped"
