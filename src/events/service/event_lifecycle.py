"""Event deletion with attendee fan-out.

Attendees are notified before anything is deleted: if any notification cannot be
enqueued the deletion is aborted and the event stays as it was.

The first fan-out commits job by job, so its jobs survive an abort and carry a
per-registration dedupe key that a retry reuses. Registrations that arrive after it
are notified inside the deletion transaction; if one of those enqueues fails the
transaction rolls back together with the jobs it created, and the retry enqueues
them again.
"""

from uuid import UUID

import structlog
from django.db import transaction

from accounts.models import AiventUser
from events.exceptions import EventDeletionAbortedError, EventNotFoundError, NotAuthorizedError
from events.models import Event, Registration
from notifications.exceptions import NotificationEnqueueError
from notifications.service import producers

logger = structlog.get_logger(__name__)


def _notify_attendees(event: Event, registrations: list[Registration]) -> int:
    """Enqueue one EVENT_CANCELLED job per registration.

    Raises:
        EventDeletionAbortedError: On the first enqueue failure
    """
    for registration in registrations:
        try:
            producers.notify_event_cancelled(event, registration)
        except NotificationEnqueueError as e:
            logger.error(
                "event_deletion_aborted",
                event_id=str(event.id),
                registration_id=str(registration.id),
                error=str(e),
            )
            raise EventDeletionAbortedError() from e
    return len(registrations)


def delete_event(event_id: UUID, caller: AiventUser) -> None:
    """Delete an event and all its registrations after notifying confirmed attendees.

    Irreversible. Jobs enqueued for attendees known before the lock is taken are
    kept when the deletion aborts; jobs for late registrations roll back with it.

    Raises:
        EventNotFoundError: If the event does not exist
        NotAuthorizedError: If the caller is not the organizer
        EventDeletionAbortedError: If attendees could not be notified; nothing was deleted
    """
    event = Event.objects.with_organizer().filter(pk=event_id).first()
    if event is None:
        raise EventNotFoundError()
    if event.organizer_id != caller.id:
        raise NotAuthorizedError("Only the event organizer can delete this event.")

    attendees = list(Registration.objects.confirmed().filter(event=event))
    notified = _notify_attendees(event, attendees)

    with transaction.atomic():
        # Lock the event so no registration slips in between the last fan-out and the delete.
        Event.objects.select_for_update().filter(pk=event.pk).first()
        notified_ids = {registration.id for registration in attendees}
        late = [r for r in Registration.objects.confirmed().filter(event=event) if r.id not in notified_ids]
        notified += _notify_attendees(event, late)

        deleted_registrations, _ = Registration.objects.filter(event=event).delete()
        Event.objects.filter(pk=event.pk).delete()

    logger.info(
        "event_deleted",
        event_id=str(event_id),
        organizer_id=str(caller.id),
        notified_count=notified,
        deleted_registrations=deleted_registrations,
    )
