import typing as t
from datetime import datetime

from django.conf import settings
from django.db import models
from django.db.models import Q

from common.models import TimeStampedModel

if t.TYPE_CHECKING:
    from accounts.models import AiventUser


class RegistrationQuerySet(models.QuerySet["Registration"]):
    def confirmed(self) -> t.Self:
        """Registrations that currently hold a seat."""
        return self.filter(status=Registration.Status.CONFIRMED)

    def with_event(self) -> t.Self:
        """Select the event and its organizer."""
        return self.select_related("event", "event__organizer")

    def for_user(self, user: "AiventUser") -> t.Self:
        """Registrations owned by the given user."""
        return self.filter(user=user)


class RegistrationManager(models.Manager["Registration"]):
    def get_queryset(self) -> RegistrationQuerySet:
        """Get base queryset for registrations."""
        return RegistrationQuerySet(self.model, using=self._db)

    def confirmed(self) -> RegistrationQuerySet:
        """Registrations that currently hold a seat."""
        return self.get_queryset().confirmed()

    def with_event(self) -> RegistrationQuerySet:
        """Select the event and its organizer."""
        return self.get_queryset().with_event()


class Registration(TimeStampedModel):
    """One attendee's reservation for one event.

    Invariants backed by database constraints:
    - at most one confirmed registration per (event, user);
    - ``qr_code`` is unique across every row ever issued;
    - a checked-in registration is confirmed and has ``checked_in_at`` set.

    State transitions (check-in, cancellation) happen through conditional
    ``UPDATE`` statements in ``events.service.registration_service``, never through
    ``save()`` on a stale instance.
    """

    class Status(models.TextChoices):
        CONFIRMED = "confirmed", "Confirmed"
        CANCELLED = "cancelled", "Cancelled"

    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="registrations")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="registrations")
    attendee_name = models.CharField(max_length=255)
    attendee_email = models.EmailField()
    qr_code = models.CharField(max_length=64, unique=True, editable=False)
    status = models.CharField(
        choices=Status.choices, default=Status.CONFIRMED, max_length=20, db_index=True
    )
    checked_in = models.BooleanField(default=False, db_index=True)
    checked_in_at = models.DateTimeField(null=True, blank=True)
    checked_in_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="checked_in_registrations",
    )
    cancelled_at = models.DateTimeField(null=True, blank=True)

    objects = RegistrationManager()

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "user"],
                condition=Q(status="confirmed"),
                name="unique_confirmed_registration_per_user",
                violation_error_message="You are already registered for this event.",
            ),
            models.CheckConstraint(
                condition=Q(checked_in=False) | Q(status="confirmed", checked_in_at__isnull=False),
                name="checked_in_registration_is_confirmed",
            ),
        ]
        indexes = [
            models.Index(fields=["event", "status"], name="registration_event_status_idx"),
            models.Index(fields=["user", "created_at"], name="registration_user_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.attendee_name} @ {self.event_id} ({self.status})"

    @property
    def registered_at(self) -> datetime:
        """When the reservation was made."""
        return self.created_at

    @property
    def is_confirmed(self) -> bool:
        """Whether the registration currently holds a seat."""
        return self.status == self.Status.CONFIRMED
