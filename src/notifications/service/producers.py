"""Helpers that build notification jobs for domain events."""

import typing as t
from datetime import date
from uuid import UUID

from django.conf import settings
from django.utils import timezone

from notifications.enums import TemplateId
from notifications.service.queue import enqueue

if t.TYPE_CHECKING:
    from events.models import Event, Registration


def _event_params(event: "Event") -> dict[str, str]:
    start = timezone.localtime(event.start_at)
    return {
        "eventName": event.title,
        "organizerName": event.organizer.display_name,
        "date": start.strftime("%A, %B %d, %Y"),
        "time": start.strftime("%H:%M"),
        "venue": event.venue,
        "mapLink": event.map_link,
        "appName": settings.APP_NAME,
    }


def notify_registration_accepted(registration: "Registration") -> UUID:
    """Send the ticket, with its check-in code, to the attendee."""
    params = {
        **_event_params(registration.event),
        "userName": registration.attendee_name,
        "qrCode": registration.qr_code,
    }
    return enqueue(
        TemplateId.REGISTRATION_ACCEPTED,
        registration.attendee_email,
        params,
        dedupe_key=f"registration-accepted:{registration.id}",
    )


def notify_registration_cancelled(registration: "Registration") -> UUID:
    """Tell the attendee their registration was cancelled."""
    params = {**_event_params(registration.event), "userName": registration.attendee_name}
    return enqueue(
        TemplateId.REGISTRATION_CANCELLED,
        registration.attendee_email,
        params,
        dedupe_key=f"registration-cancelled:{registration.id}",
    )


def notify_event_cancelled(event: "Event", registration: "Registration") -> UUID:
    """Tell an attendee the event they registered for was deleted.

    The dedupe key makes a retried deletion reuse the jobs of the failed attempt.
    """
    params = {**_event_params(event), "userName": registration.attendee_name}
    return enqueue(
        TemplateId.EVENT_CANCELLED,
        registration.attendee_email,
        params,
        dedupe_key=f"event-cancelled:{registration.id}",
    )


def notify_subscription_activated(
    email: str,
    name: str,
    plan_name: str,
    start_date: date,
    end_date: date,
    dashboard_link: str | None = None,
) -> UUID:
    """Confirm an organizer subscription. Billing lives outside this service."""
    params = {
        "userName": name,
        "planName": plan_name,
        "startDate": start_date.strftime("%B %d, %Y"),
        "endDate": end_date.strftime("%B %d, %Y"),
        "dashboardLink": dashboard_link or f"{settings.FRONTEND_BASE_URL}/dashboard",
        "appName": settings.APP_NAME,
    }
    return enqueue(TemplateId.SUBSCRIPTION_SUCCESS, email, params)
