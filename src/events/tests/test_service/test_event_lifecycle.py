import typing as t
from unittest.mock import patch
from uuid import uuid4

import pytest

from accounts.models import AiventUser
from events.exceptions import EventDeletionAbortedError, EventNotFoundError, NotAuthorizedError
from events.models import Event, Registration
from events.service import event_lifecycle
from notifications.enums import TemplateId
from notifications.exceptions import NotificationEnqueueError
from notifications.models import NotificationJob
from notifications.service import producers

pytestmark = pytest.mark.django_db


@pytest.fixture
def attendees(
    event: Event, aivent_user_factory: t.Any, make_registration: t.Callable[..., Registration]
) -> list[Registration]:
    return [make_registration(event, aivent_user_factory()) for _ in range(3)]


def test_delete_event_notifies_every_confirmed_attendee_then_deletes(
    event: Event, organizer: AiventUser, attendees: list[Registration]
) -> None:
    # Arrange
    cancelled = attendees[0]
    Registration.objects.filter(pk=cancelled.pk).update(status=Registration.Status.CANCELLED)

    # Act
    event_lifecycle.delete_event(event.id, organizer)

    # Assert
    assert not Event.objects.filter(pk=event.pk).exists()
    assert not Registration.objects.filter(event_id=event.pk).exists()
    jobs = NotificationJob.objects.filter(template_id=TemplateId.EVENT_CANCELLED)
    assert {job.recipient_email for job in jobs} == {r.attendee_email for r in attendees[1:]}
    assert {job.dedupe_key for job in jobs} == {f"event-cancelled:{r.id}" for r in attendees[1:]}
    assert all(job.params["eventName"] == event.title for job in jobs)


def test_every_attendee_is_notified_before_any_row_is_removed(
    event: Event, organizer: AiventUser, attendees: list[Registration]
) -> None:
    real_notify = producers.notify_event_cancelled
    rows_at_each_call: list[int] = []

    def counting_notify(evt: Event, registration: Registration) -> t.Any:
        rows_at_each_call.append(Registration.objects.filter(event=event).count())
        return real_notify(evt, registration)

    with patch.object(producers, "notify_event_cancelled", side_effect=counting_notify):
        event_lifecycle.delete_event(event.id, organizer)

    assert rows_at_each_call == [3, 3, 3]
    assert NotificationJob.objects.filter(template_id=TemplateId.EVENT_CANCELLED).count() == 3
    assert not Registration.objects.filter(event_id=event.pk).exists()


def test_delete_event_without_registrations(event: Event, organizer: AiventUser) -> None:
    event_lifecycle.delete_event(event.id, organizer)

    assert not Event.objects.filter(pk=event.pk).exists()
    assert not NotificationJob.objects.exists()


def test_delete_unknown_event_raises_not_found(organizer: AiventUser) -> None:
    with pytest.raises(EventNotFoundError):
        event_lifecycle.delete_event(uuid4(), organizer)


def test_only_organizer_can_delete(
    event: Event, other_organizer: AiventUser, user: AiventUser, attendees: list[Registration]
) -> None:
    for caller in (other_organizer, user):
        with pytest.raises(NotAuthorizedError):
            event_lifecycle.delete_event(event.id, caller)

    assert Event.objects.filter(pk=event.pk).exists()
    assert Registration.objects.filter(event=event).count() == 3
    assert not NotificationJob.objects.exists()


def test_enqueue_failure_aborts_deletion_and_keeps_enqueued_jobs(
    event: Event, organizer: AiventUser, attendees: list[Registration]
) -> None:
    real_notify = producers.notify_event_cancelled
    calls = {"n": 0}

    def flaky_notify(evt: Event, registration: Registration) -> t.Any:
        calls["n"] += 1
        if calls["n"] == 2:
            raise NotificationEnqueueError("queue unavailable")
        return real_notify(evt, registration)

    with patch.object(producers, "notify_event_cancelled", side_effect=flaky_notify):
        with pytest.raises(EventDeletionAbortedError):
            event_lifecycle.delete_event(event.id, organizer)

    assert Event.objects.filter(pk=event.pk).exists()
    assert Registration.objects.filter(event=event).count() == 3
    assert NotificationJob.objects.filter(template_id=TemplateId.EVENT_CANCELLED).count() == 1


def test_retried_deletion_does_not_duplicate_notifications(
    event: Event, organizer: AiventUser, attendees: list[Registration]
) -> None:
    real_notify = producers.notify_event_cancelled
    calls = {"n": 0}

    def flaky_notify(evt: Event, registration: Registration) -> t.Any:
        calls["n"] += 1
        if calls["n"] == 3:
            raise NotificationEnqueueError("queue unavailable")
        return real_notify(evt, registration)

    with patch.object(producers, "notify_event_cancelled", side_effect=flaky_notify):
        with pytest.raises(EventDeletionAbortedError):
            event_lifecycle.delete_event(event.id, organizer)

    event_lifecycle.delete_event(event.id, organizer)

    assert not Event.objects.filter(pk=event.pk).exists()
    assert NotificationJob.objects.filter(template_id=TemplateId.EVENT_CANCELLED).count() == 3


def test_failed_late_notification_rolls_back_only_the_late_jobs(
    event: Event,
    organizer: AiventUser,
    registration: Registration,
    aivent_user_factory: t.Any,
    make_registration: t.Callable[..., Registration],
) -> None:
    real_notify = producers.notify_event_cancelled
    late: list[Registration] = []
    late_calls = {"n": 0}

    def notify_then_register_latecomers(evt: Event, reg: Registration) -> t.Any:
        if reg.pk == registration.pk:
            job_id = real_notify(evt, reg)
            late.extend(make_registration(event, aivent_user_factory()) for _ in range(2))
            return job_id
        late_calls["n"] += 1
        if late_calls["n"] == 2:
            raise NotificationEnqueueError("queue unavailable")
        return real_notify(evt, reg)

    with patch.object(producers, "notify_event_cancelled", side_effect=notify_then_register_latecomers):
        with pytest.raises(EventDeletionAbortedError):
            event_lifecycle.delete_event(event.id, organizer)

    assert Event.objects.filter(pk=event.pk).exists()
    assert late_calls["n"] == 2
    assert Registration.objects.filter(pk__in=[r.pk for r in late]).count() == 2
    jobs = NotificationJob.objects.filter(template_id=TemplateId.EVENT_CANCELLED)
    assert [job.dedupe_key for job in jobs] == [f"event-cancelled:{registration.id}"]
