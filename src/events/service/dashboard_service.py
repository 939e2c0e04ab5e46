"""Organizer dashboard statistics for a single event."""

import typing as t
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from django.db.models import Count, Q
from django.utils import timezone

from accounts.models import AiventUser
from events.models import Event, Registration
from events.service.registration_service import get_event_for_organizer


class EventDashboard(t.NamedTuple):
    event: Event
    total_registrations: int
    checked_in_count: int
    pending_count: int
    capacity: int
    seats_left: int
    check_in_rate: float
    total_revenue: Decimal
    currency: str
    hours_until_event: int
    is_event_today: bool
    is_event_past: bool


def get_event_dashboard(event_id: UUID, organizer: AiventUser, now: datetime | None = None) -> EventDashboard:
    """Compute attendance stats for an event the caller organizes.

    Revenue is ticket price times confirmed registrations and is informational;
    no payment is processed.
    """
    event = get_event_for_organizer(event_id, organizer)
    now = now or timezone.now()

    counts = Registration.objects.filter(event=event, status=Registration.Status.CONFIRMED).aggregate(
        total=Count("id"),
        checked_in=Count("id", filter=Q(checked_in=True)),
    )
    total = counts["total"]
    checked_in = counts["checked_in"]

    check_in_rate = round(checked_in / total * 100, 1) if total else 0.0
    if event.ticket_type == Event.TicketType.PAID and event.ticket_price is not None:
        revenue = event.ticket_price * total
    else:
        revenue = Decimal("0.00")
    hours_until = max(int((event.start_at - now).total_seconds() // 3600), 0)

    return EventDashboard(
        event=event,
        total_registrations=total,
        checked_in_count=checked_in,
        pending_count=total - checked_in,
        capacity=event.capacity,
        seats_left=max(event.capacity - total, 0),
        check_in_rate=check_in_rate,
        total_revenue=revenue,
        currency=event.currency,
        hours_until_event=hours_until,
        is_event_today=event.is_today(now),
        is_event_past=event.is_past(now),
    )
