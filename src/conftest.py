"""
Project-wide fixtures: users, authenticated API clients and Celery/email test settings.
"""

import secrets
import string
import typing as t
from datetime import datetime, time, timedelta

import faker
import pytest
from django.test.client import Client
from django.utils import timezone
from ninja_jwt.tokens import RefreshToken

from accounts.models import AiventUser


@pytest.fixture(autouse=True)
def enable_celery_eager_mode(settings: t.Any) -> None:
    """Enable Celery eager mode for tests so tasks execute synchronously.

    This ensures that Celery tasks run immediately in the same process,
    allowing tests to verify their side effects without async complications.
    """
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


@pytest.fixture(autouse=True)
def locmem_email_backend(settings: t.Any) -> None:
    """Capture outgoing email in django.core.mail.outbox."""
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"


@pytest.fixture(autouse=True)
def immediate_notification_retries(settings: t.Any) -> None:
    """No backoff between delivery attempts, so eager retries can claim the job at once."""
    settings.NOTIFICATION_BACKOFF_BASE_SECONDS = 0
    settings.NOTIFICATION_MAX_ATTEMPTS = 3


class AiventUserFactory:
    """Factory for creating AiventUser instances for testing."""

    fake = faker.Faker()

    def create_user(self, **kwargs: t.Any) -> AiventUser:
        username = kwargs.pop(
            "username", "".join(secrets.choice(string.ascii_lowercase) for _ in range(8)) + "@user.test"
        )
        email = kwargs.pop("email", username + ("@test.com" if "@" not in username else ""))
        password = kwargs.pop("password", "password")
        first_name = kwargs.pop("first_name", self.fake.first_name())
        last_name = kwargs.pop("last_name", self.fake.last_name())
        preferred_name = kwargs.pop("preferred_name", f"{first_name} {last_name}")
        return AiventUser.objects.create_user(
            username=username,
            email=email,
            password=password,
            preferred_name=preferred_name,
            first_name=first_name,
            last_name=last_name,
            **kwargs,
        )

    def __call__(self, **kwargs: t.Any) -> AiventUser:
        return self.create_user(**kwargs)


@pytest.fixture
def aivent_user_factory() -> AiventUserFactory:
    return AiventUserFactory()


@pytest.fixture
def user(aivent_user_factory: AiventUserFactory) -> AiventUser:
    """A regular attendee."""
    return aivent_user_factory(username="attendee@example.com", preferred_name="Ada Attendee")


@pytest.fixture
def organizer(aivent_user_factory: AiventUserFactory) -> AiventUser:
    """The organizer of the default event."""
    return aivent_user_factory(username="organizer@example.com", preferred_name="Olive Organizer")


@pytest.fixture
def other_organizer(aivent_user_factory: AiventUserFactory) -> AiventUser:
    """An organizer who does not own the default event."""
    return aivent_user_factory(username="other-organizer@example.com")


@pytest.fixture
def superuser(aivent_user_factory: AiventUserFactory) -> AiventUser:
    """A superuser."""
    return aivent_user_factory(is_superuser=True, is_staff=True)


def auth_client(user: AiventUser) -> Client:
    """API client authenticated as the given user."""
    refresh = RefreshToken.for_user(user)
    return Client(HTTP_AUTHORIZATION=f"Bearer {str(refresh.access_token)}")  # type: ignore[attr-defined]


@pytest.fixture
def user_client(user: AiventUser) -> Client:
    """API client for the attendee."""
    return auth_client(user)


@pytest.fixture
def organizer_client(organizer: AiventUser) -> Client:
    """API client for the event organizer."""
    return auth_client(organizer)


@pytest.fixture
def other_organizer_client(other_organizer: AiventUser) -> Client:
    """API client for an organizer who does not own the default event."""
    return auth_client(other_organizer)


@pytest.fixture
def next_week() -> datetime:
    today = timezone.now()
    same_time_next_week = today + timedelta(days=7)
    noon = time(hour=12, minute=0)
    return timezone.make_aware(
        datetime.combine(same_time_next_week.date(), noon),
        timezone.get_current_timezone(),
    )
