"""Registration, check-in and cancellation.

Every state change is a single conditional ``UPDATE`` (or a constraint-guarded
``INSERT``) inside a transaction, so capacity, uniqueness and the check-in state
machine hold under concurrent requests without application-level locks.
"""

from uuid import UUID

import structlog
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from accounts.models import AiventUser
from events.exceptions import (
    AlreadyCancelledError,
    AlreadyCheckedInError,
    AlreadyRegisteredError,
    EventFullError,
    EventNotFoundError,
    NotAuthorizedError,
    RegistrationCancelledError,
    RegistrationNotFoundError,
)
from events.models import Event, Registration, RegistrationQuerySet
from events.service import qr_tokens
from notifications.service import producers

logger = structlog.get_logger(__name__)


def get_event_for_organizer(event_id: UUID, organizer: AiventUser) -> Event:
    """Fetch an event the caller organizes.

    Raises:
        EventNotFoundError: If the event does not exist
        NotAuthorizedError: If the caller is not the organizer
    """
    event = Event.objects.with_organizer().filter(pk=event_id).first()
    if event is None:
        raise EventNotFoundError()
    if event.organizer_id != organizer.id:
        raise NotAuthorizedError("Only the event organizer can do this.")
    return event


def _validate_attendee(attendee_name: str, attendee_email: str) -> None:
    if not attendee_name:
        raise DjangoValidationError({"attendee_name": "Attendee name is required."})
    try:
        validate_email(attendee_email)
    except DjangoValidationError as e:
        raise DjangoValidationError({"attendee_email": "Enter a valid email address."}) from e


def register(event_id: UUID, user: AiventUser, attendee_name: str, attendee_email: str) -> Registration:
    """Reserve one seat for the user.

    The seat is taken with a conditional increment that only succeeds while
    ``registration_count < capacity``. The registration row is then inserted in a
    savepoint; if the partial unique constraint rejects it, the whole transaction
    rolls back, which also releases the seat.

    Args:
        event_id: The event to register for
        user: The registering user
        attendee_name: Name printed on the ticket
        attendee_email: Where the ticket is sent

    Returns:
        The confirmed registration

    Raises:
        ValidationError: If the attendee name or email is invalid
        AlreadyRegisteredError: If the user already holds a confirmed registration
        EventFullError: If no seat is left
        EventNotFoundError: If the event does not exist
    """
    attendee_name = attendee_name.strip()
    attendee_email = attendee_email.strip()
    _validate_attendee(attendee_name, attendee_email)

    if Registration.objects.confirmed().filter(event_id=event_id, user=user).exists():
        raise AlreadyRegisteredError()

    qr_code = qr_tokens.issue()

    with transaction.atomic():
        reserved = Event.objects.filter(pk=event_id).with_free_seats().update(
            registration_count=F("registration_count") + 1
        )
        if not reserved:
            if not Event.objects.filter(pk=event_id).exists():
                raise EventNotFoundError()
            raise EventFullError()

        try:
            with transaction.atomic():
                registration = Registration.objects.create(
                    event_id=event_id,
                    user=user,
                    attendee_name=attendee_name,
                    attendee_email=attendee_email,
                    qr_code=qr_code,
                )
        except (IntegrityError, DjangoValidationError):
            if Registration.objects.confirmed().filter(event_id=event_id, user=user).exists():
                raise AlreadyRegisteredError()
            raise

    logger.info(
        "registration_created",
        registration_id=str(registration.id),
        event_id=str(event_id),
        user_id=str(user.id),
    )

    try:
        producers.notify_registration_accepted(registration)
    except Exception:
        logger.exception("registration_notification_enqueue_failed", registration_id=str(registration.id))

    return registration


def check_in(qr_code: str, organizer: AiventUser) -> str:
    """Mark the registration behind a QR code as checked in.

    Only one of several concurrent scans can succeed; the others get
    ``AlreadyCheckedInError``.

    Returns:
        The attendee name

    Raises:
        RegistrationNotFoundError: If no registration has this code
        NotAuthorizedError: If the caller does not organize the event
        RegistrationCancelledError: If the registration was cancelled
        AlreadyCheckedInError: If the registration was already checked in
    """
    registration = Registration.objects.select_related("event").filter(qr_code=qr_code).first()
    if registration is None:
        raise RegistrationNotFoundError("Invalid QR code.")
    if registration.event.organizer_id != organizer.id:
        raise NotAuthorizedError("Only the event organizer can check in attendees.")
    if not registration.is_confirmed:
        raise RegistrationCancelledError()

    now = timezone.now()
    updated = Registration.objects.filter(
        pk=registration.pk,
        status=Registration.Status.CONFIRMED,
        checked_in=False,
    ).update(checked_in=True, checked_in_at=now, checked_in_by=organizer, updated_at=now)

    if not updated:
        registration.refresh_from_db(fields=["status", "checked_in"])
        if not registration.is_confirmed:
            raise RegistrationCancelledError()
        raise AlreadyCheckedInError()

    logger.info(
        "registration_checked_in",
        registration_id=str(registration.id),
        event_id=str(registration.event_id),
        organizer_id=str(organizer.id),
    )
    return registration.attendee_name


def cancel(registration_id: UUID, caller: AiventUser) -> Registration:
    """Cancel a confirmed registration and release its seat.

    The attendee or the event organizer may cancel. The status flip and the
    seat release commit together; the decrement never takes the counter below zero.

    Raises:
        RegistrationNotFoundError: If the registration does not exist
        NotAuthorizedError: If the caller is neither the attendee nor the organizer
        AlreadyCheckedInError: If the attendee already checked in
        AlreadyCancelledError: If the registration was already cancelled
    """
    registration = Registration.objects.with_event().filter(pk=registration_id).first()
    if registration is None:
        raise RegistrationNotFoundError()
    if caller.id not in (registration.user_id, registration.event.organizer_id):
        raise NotAuthorizedError("You cannot cancel this registration.")

    now = timezone.now()
    with transaction.atomic():
        updated = Registration.objects.filter(
            pk=registration.pk,
            status=Registration.Status.CONFIRMED,
            checked_in=False,
        ).update(status=Registration.Status.CANCELLED, cancelled_at=now, updated_at=now)

        if not updated:
            registration.refresh_from_db(fields=["status", "checked_in"])
            if registration.checked_in:
                raise AlreadyCheckedInError("Checked-in registrations cannot be cancelled.")
            raise AlreadyCancelledError()

        Event.objects.filter(pk=registration.event_id, registration_count__gt=0).update(
            registration_count=F("registration_count") - 1
        )

    registration.status = Registration.Status.CANCELLED
    registration.cancelled_at = now

    logger.info(
        "registration_cancelled",
        registration_id=str(registration.id),
        event_id=str(registration.event_id),
        cancelled_by=str(caller.id),
    )

    try:
        producers.notify_registration_cancelled(registration)
    except Exception:
        logger.exception("registration_notification_enqueue_failed", registration_id=str(registration.id))

    return registration


def check_status(event_id: UUID, user: AiventUser) -> Registration | None:
    """Return the user's confirmed registration for the event, if any."""
    return Registration.objects.confirmed().for_user(user).filter(event_id=event_id).first()


def list_user_registrations(user: AiventUser) -> RegistrationQuerySet:
    """All of the user's registrations, newest first, with their events."""
    return Registration.objects.with_event().for_user(user).order_by("-created_at")


def list_event_registrations(event_id: UUID, organizer: AiventUser) -> RegistrationQuerySet:
    """Attendee list for an event, visible to its organizer only."""
    event = get_event_for_organizer(event_id, organizer)
    return Registration.objects.get_queryset().filter(event=event).order_by("-created_at")


def get_registration_for_ticket(registration_id: UUID, caller: AiventUser) -> Registration:
    """Fetch a registration whose ticket the caller may see (attendee or organizer)."""
    registration = Registration.objects.with_event().filter(pk=registration_id).first()
    if registration is None:
        raise RegistrationNotFoundError()
    if caller.id not in (registration.user_id, registration.event.organizer_id):
        raise NotAuthorizedError("You cannot view this ticket.")
    return registration
