import typing as t

import pytest

from notifications.enums import JobStatus, TemplateId
from notifications.models import NotificationJob


@pytest.fixture
def job_params() -> dict[str, str]:
    return {
        "userName": "Ada",
        "eventName": "PyCon Meetup",
        "organizerName": "Olive",
        "date": "Friday, March 06, 2026",
        "time": "18:00",
        "venue": "Community Hall",
        "mapLink": "https://maps.example.com/hall",
        "appName": "Aivent",
    }


@pytest.fixture
def make_job(job_params: dict[str, str]) -> t.Callable[..., NotificationJob]:
    """Insert a job row directly, bypassing the producer."""

    def _make(**kwargs: t.Any) -> NotificationJob:
        return NotificationJob.objects.create(
            template_id=kwargs.pop("template_id", TemplateId.EVENT_CANCELLED),
            recipient_email=kwargs.pop("recipient_email", "ada@example.com"),
            params=kwargs.pop("params", job_params),
            status=kwargs.pop("status", JobStatus.PENDING),
            **kwargs,
        )

    return _make


@pytest.fixture
def pending_job(make_job: t.Callable[..., NotificationJob]) -> NotificationJob:
    return make_job()
