"""Producer side of the notification queue.

A job is accepted once its row is committed. The broker message only carries the
job id and is published after commit; if publishing fails the row stays pending and
``requeue_stale_notification_jobs`` republishes it.
"""

import typing as t
from functools import partial
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import DatabaseError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from notifications.enums import JobStatus, TemplateId
from notifications.exceptions import NotificationEnqueueError
from notifications.models import NotificationJob
from notifications.service.templates.registry import get_template

logger = structlog.get_logger(__name__)


def _validate_params(params: t.Mapping[str, t.Any]) -> dict[str, str]:
    """Ensure params is a flat mapping of strings to strings."""
    if not isinstance(params, t.Mapping):
        raise ValueError("params must be a mapping of strings to strings")
    for key, value in params.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise ValueError(f"params must map strings to strings, got {key!r}: {type(value).__name__}")
    return dict(params)


def enqueue(
    template_id: TemplateId | str,
    to: str,
    params: t.Mapping[str, str],
    *,
    subject: str | None = None,
    dedupe_key: str | None = None,
) -> UUID:
    """Accept a notification job for asynchronous delivery.

    Never waits for delivery. When ``dedupe_key`` matches an existing job, that job's
    id is returned and nothing new is published.

    Args:
        template_id: Template to render
        to: Recipient email address
        params: Template parameters, strings only
        subject: Optional subject overriding the template default
        dedupe_key: Optional idempotency key

    Returns:
        The job id

    Raises:
        UnknownTemplateError: If the template is not registered
        ValueError: If the recipient or params are invalid
        NotificationEnqueueError: If the job could not be persisted
    """
    template = get_template(template_id)
    clean_params = _validate_params(params)
    try:
        validate_email(to)
    except ValidationError as e:
        raise ValueError(f"Invalid recipient email: {to!r}") from e

    fields = {
        "template_id": template.template_id,
        "recipient_email": to,
        "params": clean_params,
        "subject": subject or "",
    }

    try:
        with transaction.atomic():
            if dedupe_key:
                job, created = NotificationJob.objects.get_or_create(dedupe_key=dedupe_key, defaults=fields)
            else:
                job = NotificationJob.objects.create(**fields)
                created = True
    except DatabaseError as e:
        logger.error(
            "notification_enqueue_failed",
            template_id=str(template.template_id),
            dedupe_key=dedupe_key,
            error=str(e),
        )
        raise NotificationEnqueueError(f"Could not enqueue {template.template_id} notification") from e

    if not created:
        logger.debug("notification_job_deduplicated", job_id=str(job.id), dedupe_key=dedupe_key)
        return job.id

    job_id = job.id
    transaction.on_commit(lambda: publish(job_id))

    logger.info(
        "notification_job_enqueued",
        job_id=str(job_id),
        template_id=str(template.template_id),
        dedupe_key=dedupe_key,
    )
    return job_id


def publish(job_id: UUID) -> bool:
    """Hand a job id to the Celery broker.

    Publishing failures are logged and swallowed: the job row is already durable
    and the sweeper republishes pending jobs.

    Returns:
        True if the message was published
    """
    from notifications.tasks import deliver_notification_job

    try:
        deliver_notification_job.delay(str(job_id))
    except Exception:
        logger.exception("notification_job_publish_failed", job_id=str(job_id))
        return False
    return True


def requeue_failed_jobs(queryset: QuerySet[NotificationJob]) -> int:
    """Give dead-lettered jobs a fresh retry budget and publish them again.

    Only jobs in ``failed`` are touched; this is an explicit operator action.

    Returns:
        Number of jobs requeued
    """
    now = timezone.now()
    with transaction.atomic():
        job_ids = list(queryset.filter(status=JobStatus.FAILED).values_list("pk", flat=True))
        count = NotificationJob.objects.filter(pk__in=job_ids, status=JobStatus.FAILED).update(
            status=JobStatus.PENDING,
            attempt=0,
            next_attempt_at=now,
            claimed_at=None,
            failed_at=None,
            republished_at=None,
            updated_at=now,
        )
        for job_id in job_ids:
            transaction.on_commit(partial(publish, job_id))

    logger.info("notification_jobs_requeued", count=count)
    return count
