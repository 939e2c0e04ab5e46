"""Consumer side of the notification queue.

``process_job`` runs one delivery attempt for one job. Claiming is a conditional
``UPDATE`` from ``pending`` to ``in_flight``, so when the same job id is delivered
twice by the broker only one worker sends the email.
"""

import typing as t
from datetime import timedelta
from uuid import UUID

import structlog
from django.conf import settings
from django.db.models import F
from django.template import TemplateDoesNotExist
from django.utils import timezone

from notifications.enums import JobOutcome, JobStatus
from notifications.exceptions import UnknownTemplateError
from notifications.models import NotificationJob
from notifications.service.email_transport import send_email
from notifications.service.templates.registry import get_template

logger = structlog.get_logger(__name__)

# Errors that no amount of retrying will fix.
PERMANENT_ERRORS: tuple[type[Exception], ...] = (UnknownTemplateError, TemplateDoesNotExist)


class ProcessResult(t.NamedTuple):
    """Outcome of one worker pass and, for retries, the delay before the next attempt."""

    outcome: JobOutcome
    countdown: int = 0


def backoff_delay(attempt: int) -> int:
    """Seconds to wait after the given (1-based) failed attempt.

    ``base * 2 ** (attempt - 1)``, capped at the configured maximum.
    """
    base = settings.NOTIFICATION_BACKOFF_BASE_SECONDS
    cap = settings.NOTIFICATION_BACKOFF_MAX_SECONDS
    return int(min(cap, base * 2 ** max(attempt - 1, 0)))


def claim_job(job_id: UUID | str) -> NotificationJob | None:
    """Atomically move a due pending job to in_flight.

    Returns:
        The claimed job, or None if another worker owns it, it is not yet due,
        it is terminal, or it does not exist.
    """
    now = timezone.now()
    claimed = NotificationJob.objects.due(now).filter(pk=job_id).update(
        status=JobStatus.IN_FLIGHT,
        attempt=F("attempt") + 1,
        claimed_at=now,
        updated_at=now,
    )
    if not claimed:
        return None
    return NotificationJob.objects.get(pk=job_id)


def process_job(job_id: UUID | str) -> ProcessResult:
    """Run one delivery attempt for a job.

    Never raises for delivery problems: every failure ends with the job either
    rescheduled (pending) or dead-lettered (failed).

    Args:
        job_id: The job to process

    Returns:
        What happened, and the countdown for a retry
    """
    job = claim_job(job_id)
    if job is None:
        logger.debug("notification_job_skipped", job_id=str(job_id))
        return ProcessResult(JobOutcome.SKIPPED)

    try:
        template = get_template(job.template_id)
        email = template.render(job.params, subject=job.subject or None)
        send_email(job.recipient_email, email)
    except PERMANENT_ERRORS as e:
        _mark_failed(job, e)
        return ProcessResult(JobOutcome.FAILED)
    except Exception as e:
        if job.attempt >= settings.NOTIFICATION_MAX_ATTEMPTS:
            _mark_failed(job, e)
            return ProcessResult(JobOutcome.FAILED)
        countdown = _reschedule(job, e)
        return ProcessResult(JobOutcome.RETRY, countdown)

    now = timezone.now()
    NotificationJob.objects.filter(pk=job.pk, status=JobStatus.IN_FLIGHT).update(
        status=JobStatus.DELIVERED,
        delivered_at=now,
        last_error="",
        updated_at=now,
    )
    logger.info(
        "notification_job_delivered",
        job_id=str(job.id),
        template_id=job.template_id,
        attempt=job.attempt,
    )
    return ProcessResult(JobOutcome.DELIVERED)


def _reschedule(job: NotificationJob, error: Exception) -> int:
    countdown = backoff_delay(job.attempt)
    now = timezone.now()
    NotificationJob.objects.filter(pk=job.pk, status=JobStatus.IN_FLIGHT).update(
        status=JobStatus.PENDING,
        last_error=_describe(error),
        next_attempt_at=now + timedelta(seconds=countdown),
        claimed_at=None,
        republished_at=None,
        updated_at=now,
    )
    logger.warning(
        "notification_job_retry_scheduled",
        job_id=str(job.id),
        template_id=job.template_id,
        attempt=job.attempt,
        countdown=countdown,
        error=_describe(error),
    )
    return countdown


def _mark_failed(job: NotificationJob, error: Exception) -> None:
    now = timezone.now()
    NotificationJob.objects.filter(pk=job.pk, status=JobStatus.IN_FLIGHT).update(
        status=JobStatus.FAILED,
        last_error=_describe(error),
        failed_at=now,
        updated_at=now,
    )
    logger.error(
        "notification_job_dead_lettered",
        job_id=str(job.id),
        template_id=job.template_id,
        recipient=job.recipient_email,
        attempt=job.attempt,
        error=_describe(error),
    )


def _describe(error: Exception) -> str:
    return f"{type(error).__name__}: {error}"[:2000]
