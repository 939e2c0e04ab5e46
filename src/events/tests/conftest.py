import typing as t
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from accounts.models import AiventUser
from events.models import Event, Registration
from events.service import qr_tokens


@pytest.fixture
def event(organizer: AiventUser, next_week: datetime) -> Event:
    return Event.objects.create(
        organizer=organizer,
        title="PyCon Meetup",
        venue="Community Hall",
        map_link="https://maps.example.com/hall",
        capacity=10,
        start_at=next_week,
        end_at=next_week + timedelta(hours=3),
    )


@pytest.fixture
def paid_event(organizer: AiventUser, next_week: datetime) -> Event:
    return Event.objects.create(
        organizer=organizer,
        title="Django Workshop",
        capacity=20,
        ticket_type=Event.TicketType.PAID,
        ticket_price=Decimal("25.00"),
        currency="EUR",
        start_at=next_week,
        end_at=next_week + timedelta(hours=8),
    )


@pytest.fixture
def single_seat_event(organizer: AiventUser, next_week: datetime) -> Event:
    return Event.objects.create(
        organizer=organizer,
        title="Dinner for One",
        capacity=1,
        start_at=next_week,
        end_at=next_week + timedelta(hours=2),
    )


@pytest.fixture
def make_registration() -> t.Callable[..., Registration]:
    """Insert a confirmed registration directly, keeping the event counter in step."""

    def _make(event: Event, user: AiventUser, **kwargs: t.Any) -> Registration:
        registration = Registration.objects.create(
            event=event,
            user=user,
            attendee_name=kwargs.pop("attendee_name", user.display_name),
            attendee_email=kwargs.pop("attendee_email", user.email),
            qr_code=kwargs.pop("qr_code", qr_tokens.issue()),
            **kwargs,
        )
        if registration.status == Registration.Status.CONFIRMED:
            Event.objects.filter(pk=event.pk).update(registration_count=event.registration_count + 1)
            event.refresh_from_db()
        return registration

    return _make


@pytest.fixture
def registration(event: Event, user: AiventUser, make_registration: t.Callable[..., Registration]) -> Registration:
    return make_registration(event, user)
