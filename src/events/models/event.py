import typing as t
from datetime import datetime

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from common.models import TimeStampedModel


class EventQuerySet(models.QuerySet["Event"]):
    def with_organizer(self) -> t.Self:
        """Select the organizer for serialization and notification params."""
        return self.select_related("organizer")

    def with_free_seats(self) -> t.Self:
        """Events that still accept registrations."""
        return self.filter(registration_count__lt=F("capacity"))


class EventManager(models.Manager["Event"]):
    def get_queryset(self) -> EventQuerySet:
        """Get base queryset for events."""
        return EventQuerySet(self.model, using=self._db)

    def with_organizer(self) -> EventQuerySet:
        """Select the organizer for serialization and notification params."""
        return self.get_queryset().with_organizer()


class Event(TimeStampedModel):
    """The event reference the registration core works against.

    Metadata (description, images, search) is owned by the event catalogue; this
    model keeps only what capacity enforcement, check-in authorization and
    notifications need. ``registration_count`` is the authoritative seat counter
    and is only ever mutated through conditional updates in the registration service.
    """

    class TicketType(models.TextChoices):
        FREE = "free", "Free"
        PAID = "paid", "Paid"

    organizer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="organized_events"
    )
    title = models.CharField(max_length=255, db_index=True)
    venue = models.CharField(max_length=255, blank=True, default="")
    map_link = models.URLField(max_length=500, blank=True, default="")
    capacity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    registration_count = models.PositiveIntegerField(default=0)
    ticket_type = models.CharField(
        choices=TicketType.choices, default=TicketType.FREE, max_length=10, db_index=True
    )
    ticket_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        help_text="Informational only. No payment is processed.",
    )
    currency = models.CharField(max_length=3, default=settings.DEFAULT_CURRENCY, help_text="ISO 4217 currency code")
    start_at = models.DateTimeField(db_index=True)
    end_at = models.DateTimeField()

    objects = EventManager()

    class Meta:
        ordering = ["start_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(registration_count__lte=F("capacity")),
                name="event_registration_count_within_capacity",
            ),
            models.CheckConstraint(
                condition=Q(end_at__gte=F("start_at")),
                name="event_end_after_start",
            ),
        ]

    def __str__(self) -> str:
        return self.title

    def clean(self) -> None:
        """Validate ticket pricing."""
        super().clean()
        if self.ticket_type == self.TicketType.PAID and self.ticket_price is None:
            raise DjangoValidationError({"ticket_price": "Paid events must have a ticket price."})
        if self.ticket_type == self.TicketType.FREE and self.ticket_price:
            raise DjangoValidationError({"ticket_price": "Free events cannot have a ticket price."})

    @property
    def seats_left(self) -> int:
        """Remaining capacity as last read from the database."""
        return max(self.capacity - self.registration_count, 0)

    def is_past(self, now: datetime | None = None) -> bool:
        """Whether the event has already ended."""
        return self.end_at < (now or timezone.now())

    def is_today(self, now: datetime | None = None) -> bool:
        """Whether the event starts today in the configured time zone."""
        now = now or timezone.now()
        return timezone.localdate(self.start_at) == timezone.localdate(now)
