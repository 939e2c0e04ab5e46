"""Models for the notification system."""

import typing as t
from datetime import datetime

from django.db import models
from django.utils import timezone

from common.models import TimeStampedModel
from notifications.enums import JobStatus, TemplateId


class NotificationJobQuerySet(models.QuerySet["NotificationJob"]):
    def pending(self) -> t.Self:
        """Jobs waiting for a worker."""
        return self.filter(status=JobStatus.PENDING)

    def due(self, now: datetime | None = None) -> t.Self:
        """Pending jobs whose backoff has elapsed."""
        return self.pending().filter(next_attempt_at__lte=now or timezone.now())

    def dead_lettered(self) -> t.Self:
        """Jobs that exhausted their retry budget."""
        return self.filter(status=JobStatus.FAILED)


class NotificationJob(TimeStampedModel):
    """One email to deliver, owned by the queue until it reaches a terminal state.

    The row is the durable queue entry: the broker only carries the job id. Workers
    claim a job with a conditional update (pending -> in_flight), so a duplicate
    broker message can never deliver the same attempt twice.
    """

    template_id = models.CharField(max_length=50, choices=TemplateId.choices, db_index=True)
    recipient_email = models.EmailField()
    subject = models.CharField(max_length=255, blank=True, default="", help_text="Overrides the template subject")
    params = models.JSONField(default=dict, blank=True, help_text="Template parameters: {name: string value}")

    status = models.CharField(max_length=20, choices=JobStatus.choices, default=JobStatus.PENDING, db_index=True)
    attempt = models.PositiveIntegerField(default=0, help_text="Number of delivery attempts started")
    last_error = models.TextField(blank=True, default="")

    next_attempt_at = models.DateTimeField(default=timezone.now, db_index=True)
    claimed_at = models.DateTimeField(null=True, blank=True, help_text="When the current attempt started")
    republished_at = models.DateTimeField(
        null=True, blank=True, help_text="When the sweeper last republished this job to the broker"
    )
    delivered_at = models.DateTimeField(null=True, blank=True)
    failed_at = models.DateTimeField(null=True, blank=True)

    dedupe_key = models.CharField(
        max_length=255,
        unique=True,
        null=True,
        blank=True,
        help_text="Producer-supplied key; enqueueing the same key twice yields the same job",
    )

    objects = NotificationJobQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "next_attempt_at"], name="notifjob_status_next_idx"),
            models.Index(fields=["status", "claimed_at"], name="notifjob_status_claimed_idx"),
        ]
        verbose_name = "Notification Job"
        verbose_name_plural = "Notification Jobs"

    def __str__(self) -> str:
        return f"{self.template_id} to {self.recipient_email} - {self.status}"
