"""Celery tasks for notification delivery and queue maintenance."""

import typing as t
from datetime import timedelta

import structlog
from celery import shared_task
from django.conf import settings
from django.db.models import Q
from django.utils import timezone

from notifications.enums import JobOutcome, JobStatus
from notifications.models import NotificationJob
from notifications.service.worker import process_job

logger = structlog.get_logger(__name__)


@shared_task
def deliver_notification_job(job_id: str) -> dict[str, t.Any]:
    """Run one delivery attempt for a notification job.

    Delivery failures never raise out of the task. A retryable failure schedules
    the next attempt with ``countdown`` equal to the job's backoff.

    Args:
        job_id: UUID of the NotificationJob

    Returns:
        Dict with the attempt outcome
    """
    result = process_job(job_id)

    if result.outcome == JobOutcome.RETRY:
        try:
            deliver_notification_job.apply_async((job_id,), countdown=result.countdown)
        except Exception:
            # The job is pending in the database; the sweeper republishes it.
            logger.exception("notification_job_retry_publish_failed", job_id=job_id)

    return {"job_id": job_id, "outcome": str(result.outcome), "countdown": result.countdown}


# ===== Maintenance Tasks =====


@shared_task
def requeue_stale_notification_jobs() -> dict[str, t.Any]:
    """Recover jobs whose broker message or worker was lost.

    Runs every minute via Celery beat:
    - in_flight jobs claimed longer ago than NOTIFICATION_VISIBILITY_TIMEOUT_SECONDS go
      back to pending, or to failed if their retry budget is spent;
    - pending jobs that have been due for longer than NOTIFICATION_REPUBLISH_GRACE_SECONDS
      are published again, at most once per NOTIFICATION_REPUBLISH_INTERVAL_SECONDS.

    Returns:
        Dict with sweep stats
    """
    from notifications.service.queue import publish

    now = timezone.now()
    batch_size = settings.NOTIFICATION_SWEEP_BATCH_SIZE
    stale_before = now - timedelta(seconds=settings.NOTIFICATION_VISIBILITY_TIMEOUT_SECONDS)

    stale = NotificationJob.objects.filter(status=JobStatus.IN_FLIGHT, claimed_at__lt=stale_before)
    stale_ids = list(stale.values_list("pk", flat=True)[:batch_size])

    exhausted_count = NotificationJob.objects.filter(
        pk__in=stale_ids,
        status=JobStatus.IN_FLIGHT,
        attempt__gte=settings.NOTIFICATION_MAX_ATTEMPTS,
    ).update(
        status=JobStatus.FAILED,
        last_error="Worker lost while delivering",
        failed_at=now,
        updated_at=now,
    )
    released_count = NotificationJob.objects.filter(pk__in=stale_ids, status=JobStatus.IN_FLIGHT).update(
        status=JobStatus.PENDING,
        claimed_at=None,
        next_attempt_at=now,
        updated_at=now,
    )

    overdue_before = now - timedelta(seconds=settings.NOTIFICATION_REPUBLISH_GRACE_SECONDS)
    republish_before = now - timedelta(seconds=settings.NOTIFICATION_REPUBLISH_INTERVAL_SECONDS)
    overdue_ids = list(
        NotificationJob.objects.pending()
        .filter(next_attempt_at__lte=overdue_before)
        .filter(Q(republished_at__isnull=True) | Q(republished_at__lte=republish_before))
        .order_by("next_attempt_at")
        .values_list("pk", flat=True)[:batch_size]
    )
    released_ids = list(
        NotificationJob.objects.filter(pk__in=stale_ids, status=JobStatus.PENDING).values_list("pk", flat=True)
    )
    to_publish = dict.fromkeys([*released_ids, *overdue_ids])
    published_ids = [job_id for job_id in to_publish if publish(job_id)]
    NotificationJob.objects.filter(pk__in=published_ids, status=JobStatus.PENDING).update(
        republished_at=now, updated_at=now
    )
    republished_count = len(published_ids)

    if exhausted_count or released_count or republished_count:
        logger.info(
            "notification_jobs_swept",
            exhausted_count=exhausted_count,
            released_count=released_count,
            republished_count=republished_count,
        )
    else:
        logger.debug("notification_jobs_swept", republished_count=0)

    return {
        "exhausted_count": exhausted_count,
        "released_count": released_count,
        "republished_count": republished_count,
    }
