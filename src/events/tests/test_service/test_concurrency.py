"""Race tests for capacity, uniqueness and check-in.

Each test races real threads, each on its own database connection, against the PostgreSQL
test database.
"""

import typing as t
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest
from django.db import connections
from django.utils import timezone

from accounts.models import AiventUser
from events.exceptions import AlreadyCancelledError, AlreadyCheckedInError, AlreadyRegisteredError, EventFullError
from events.models import Event, Registration
from events.service import registration_service

pytestmark = pytest.mark.django_db(transaction=True)

T = t.TypeVar("T")


def run_concurrently(fn: t.Callable[[int], T], count: int) -> list[T | Exception]:
    """Run fn(i) for i in range(count) on separate threads and database connections."""

    def _call(i: int) -> T | Exception:
        try:
            return fn(i)
        except Exception as e:
            return e
        finally:
            connections.close_all()

    with ThreadPoolExecutor(max_workers=count) as pool:
        return list(pool.map(_call, range(count)))


@pytest.fixture
def race_event(organizer: AiventUser) -> Event:
    start = timezone.now() + timedelta(days=3)
    return Event.objects.create(
        organizer=organizer, title="Race", capacity=5, start_at=start, end_at=start + timedelta(hours=2)
    )


def test_concurrent_registrations_never_exceed_capacity(race_event: Event, aivent_user_factory: t.Any) -> None:
    users = [aivent_user_factory() for _ in range(20)]

    results = run_concurrently(
        lambda i: registration_service.register(race_event.id, users[i], f"User {i}", f"u{i}@example.com"), 20
    )

    race_event.refresh_from_db()
    successes = [r for r in results if isinstance(r, Registration)]
    assert len(successes) == 5
    assert all(isinstance(r, EventFullError) for r in results if not isinstance(r, Registration))
    assert race_event.registration_count == 5
    assert Registration.objects.confirmed().filter(event=race_event).count() == 5


def test_concurrent_duplicate_registrations_yield_one_row(race_event: Event, user: AiventUser) -> None:
    results = run_concurrently(
        lambda i: registration_service.register(race_event.id, user, "Ada", "ada@example.com"), 8
    )

    race_event.refresh_from_db()
    assert sum(isinstance(r, Registration) for r in results) == 1
    assert all(isinstance(r, AlreadyRegisteredError) for r in results if not isinstance(r, Registration))
    assert race_event.registration_count == 1
    assert Registration.objects.filter(event=race_event, user=user).count() == 1


def test_concurrent_check_ins_succeed_once(race_event: Event, user: AiventUser, organizer: AiventUser) -> None:
    registration = registration_service.register(race_event.id, user, "Ada", "ada@example.com")

    results = run_concurrently(lambda i: registration_service.check_in(registration.qr_code, organizer), 8)

    assert results.count("Ada") == 1
    assert all(isinstance(r, AlreadyCheckedInError) for r in results if r != "Ada")


def test_concurrent_cancels_release_one_seat(race_event: Event, user: AiventUser) -> None:
    registration = registration_service.register(race_event.id, user, "Ada", "ada@example.com")

    results = run_concurrently(lambda i: registration_service.cancel(registration.id, user), 8)

    race_event.refresh_from_db()
    assert sum(isinstance(r, Registration) for r in results) == 1
    assert race_event.registration_count == 0
    assert all(isinstance(r, AlreadyCancelledError) for r in results if not isinstance(r, Registration))


def test_two_callers_for_last_seat_one_wins(organizer: AiventUser, aivent_user_factory: t.Any) -> None:
    start = timezone.now() + timedelta(days=3)
    event = Event.objects.create(
        organizer=organizer, title="Last seat", capacity=1, start_at=start, end_at=start + timedelta(hours=2)
    )
    users = [aivent_user_factory(), aivent_user_factory()]

    results = run_concurrently(
        lambda i: registration_service.register(event.id, users[i], f"User {i}", f"u{i}@example.com"), 2
    )

    event.refresh_from_db()
    assert sum(isinstance(r, Registration) for r in results) == 1
    assert sum(isinstance(r, EventFullError) for r in results) == 1
    assert event.registration_count == 1
