import typing as t
from unittest.mock import patch
from uuid import uuid4

import pytest
from django.test.client import Client
from django.urls import resolve, reverse

from events.models import Event, Registration
from notifications.enums import TemplateId
from notifications.exceptions import NotificationEnqueueError
from notifications.models import NotificationJob

pytestmark = pytest.mark.django_db


class TestCheckRegistration:
    def test_registered(self, user_client: Client, event: Event, registration: Registration) -> None:
        response = user_client.get(reverse("api:check_registration", kwargs={"event_id": event.id}))

        assert response.status_code == 200
        data = response.json()
        assert data["registered"] is True
        assert data["registration"]["id"] == str(registration.id)

    def test_not_registered(self, user_client: Client, event: Event) -> None:
        response = user_client.get(reverse("api:check_registration", kwargs={"event_id": event.id}))

        assert response.status_code == 200
        assert response.json() == {"registered": False, "registration": None}


class TestEventRegistrations:
    def test_organizer_lists_attendees(
        self, organizer_client: Client, event: Event, registration: Registration
    ) -> None:
        response = organizer_client.get(reverse("api:list_event_registrations", kwargs={"event_id": event.id}))

        assert response.status_code == 200
        assert [r["id"] for r in response.json()] == [str(registration.id)]

    def test_attendee_gets_403(self, user_client: Client, event: Event, registration: Registration) -> None:
        response = user_client.get(reverse("api:list_event_registrations", kwargs={"event_id": event.id}))

        assert response.status_code == 403


class TestDashboard:
    def test_dashboard_stats(self, organizer_client: Client, event: Event, registration: Registration) -> None:
        response = organizer_client.get(reverse("api:event_dashboard", kwargs={"event_id": event.id}))

        assert response.status_code == 200
        data = response.json()
        assert data["event"]["id"] == str(event.id)
        assert data["total_registrations"] == 1
        assert data["checked_in_count"] == 0
        assert data["pending_count"] == 1
        assert data["capacity"] == 10
        assert data["is_event_past"] is False

    def test_dashboard_unknown_event_returns_404(self, organizer_client: Client) -> None:
        response = organizer_client.get(reverse("api:event_dashboard", kwargs={"event_id": uuid4()}))

        assert response.status_code == 404


class TestDeleteEvent:
    def test_organizer_deletes_event(
        self,
        organizer_client: Client,
        event: Event,
        aivent_user_factory: t.Any,
        make_registration: t.Callable[..., Registration],
    ) -> None:
        registrations = [make_registration(event, aivent_user_factory()) for _ in range(2)]

        response = organizer_client.delete(reverse("api:delete_event", kwargs={"event_id": event.id}))

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert not Event.objects.filter(pk=event.pk).exists()
        assert not Registration.objects.filter(pk__in=[r.pk for r in registrations]).exists()
        assert NotificationJob.objects.filter(template_id=TemplateId.EVENT_CANCELLED).count() == 2

    def test_non_organizer_gets_403(self, user_client: Client, event: Event) -> None:
        response = user_client.delete(reverse("api:delete_event", kwargs={"event_id": event.id}))

        assert response.status_code == 403
        assert Event.objects.filter(pk=event.pk).exists()

    def test_unknown_event_returns_404(self, organizer_client: Client) -> None:
        response = organizer_client.delete(reverse("api:delete_event", kwargs={"event_id": uuid4()}))

        assert response.status_code == 404

    def test_enqueue_failure_returns_503_and_keeps_event(
        self, organizer_client: Client, event: Event, registration: Registration
    ) -> None:
        with patch(
            "notifications.service.producers.notify_event_cancelled",
            side_effect=NotificationEnqueueError("queue unavailable"),
        ):
            response = organizer_client.delete(reverse("api:delete_event", kwargs={"event_id": event.id}))

        assert response.status_code == 503
        assert Event.objects.filter(pk=event.pk).exists()
        assert Registration.objects.filter(pk=registration.pk).exists()


@pytest.mark.parametrize(
    ("path", "url_name"),
    [
        ("/api/events/user/tickets", "list_user_tickets"),
        ("/api/events/register", "register"),
        ("/api/events/check-in", "check_in"),
    ],
)
def test_literal_routes_are_not_shadowed_by_event_routes(path: str, url_name: str) -> None:
    assert resolve(path).url_name == url_name
