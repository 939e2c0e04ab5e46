import typing as t
from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from freezegun import freeze_time

from accounts.models import AiventUser
from events.exceptions import NotAuthorizedError
from events.models import Event, Registration
from events.service import dashboard_service, registration_service

pytestmark = pytest.mark.django_db


def test_dashboard_counts_confirmed_and_checked_in(
    paid_event: Event,
    organizer: AiventUser,
    aivent_user_factory: t.Any,
    make_registration: t.Callable[..., Registration],
) -> None:
    # Arrange
    registrations = [make_registration(paid_event, aivent_user_factory()) for _ in range(4)]
    registration_service.check_in(registrations[0].qr_code, organizer)
    registration_service.cancel(registrations[1].id, organizer)

    # Act
    dashboard = dashboard_service.get_event_dashboard(paid_event.id, organizer)

    # Assert
    assert dashboard.total_registrations == 3
    assert dashboard.checked_in_count == 1
    assert dashboard.pending_count == 2
    assert dashboard.capacity == 20
    assert dashboard.seats_left == 17
    assert dashboard.check_in_rate == 33.3
    assert dashboard.total_revenue == Decimal("75.00")
    assert dashboard.currency == "EUR"


def test_dashboard_for_free_event_without_registrations(event: Event, organizer: AiventUser) -> None:
    dashboard = dashboard_service.get_event_dashboard(event.id, organizer)

    assert dashboard.total_registrations == 0
    assert dashboard.check_in_rate == 0.0
    assert dashboard.total_revenue == Decimal("0.00")


def test_dashboard_timing_flags(event: Event, organizer: AiventUser, next_week: datetime) -> None:
    with freeze_time(next_week - timedelta(hours=30)):
        upcoming = dashboard_service.get_event_dashboard(event.id, organizer)
    with freeze_time(next_week + timedelta(hours=1)):
        ongoing = dashboard_service.get_event_dashboard(event.id, organizer)
    with freeze_time(next_week + timedelta(days=1)):
        past = dashboard_service.get_event_dashboard(event.id, organizer)

    assert upcoming.hours_until_event == 30
    assert upcoming.is_event_past is False
    assert ongoing.hours_until_event == 0
    assert ongoing.is_event_today is True
    assert ongoing.is_event_past is False
    assert past.is_event_past is True


def test_dashboard_is_organizer_only(event: Event, other_organizer: AiventUser) -> None:
    with pytest.raises(NotAuthorizedError):
        dashboard_service.get_event_dashboard(event.id, other_organizer)
