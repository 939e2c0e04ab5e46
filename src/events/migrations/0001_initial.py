import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("title", models.CharField(db_index=True, max_length=255)),
                ("venue", models.CharField(blank=True, default="", max_length=255)),
                ("map_link", models.URLField(blank=True, default="", max_length=500)),
                ("capacity", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("registration_count", models.PositiveIntegerField(default=0)),
                (
                    "ticket_type",
                    models.CharField(
                        choices=[("free", "Free"), ("paid", "Paid")], db_index=True, default="free", max_length=10
                    ),
                ),
                (
                    "ticket_price",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Informational only. No payment is processed.",
                        max_digits=10,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "currency",
                    models.CharField(default=settings.DEFAULT_CURRENCY, help_text="ISO 4217 currency code", max_length=3),
                ),
                ("start_at", models.DateTimeField(db_index=True)),
                ("end_at", models.DateTimeField()),
                (
                    "organizer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="organized_events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["start_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("registration_count__lte", models.F("capacity"))),
                        name="event_registration_count_within_capacity",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("end_at__gte", models.F("start_at"))),
                        name="event_end_after_start",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Registration",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("attendee_name", models.CharField(max_length=255)),
                ("attendee_email", models.EmailField(max_length=254)),
                ("qr_code", models.CharField(editable=False, max_length=64, unique=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("confirmed", "Confirmed"), ("cancelled", "Cancelled")],
                        db_index=True,
                        default="confirmed",
                        max_length=20,
                    ),
                ),
                ("checked_in", models.BooleanField(db_index=True, default=False)),
                ("checked_in_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                (
                    "checked_in_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="checked_in_registrations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="registrations",
                        to="events.event",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="registrations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["event", "status"], name="registration_event_status_idx"),
                    models.Index(fields=["user", "created_at"], name="registration_user_created_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("status", "confirmed")),
                        fields=("event", "user"),
                        name="unique_confirmed_registration_per_user",
                        violation_error_message="You are already registered for this event.",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("checked_in", False),
                            models.Q(("status", "confirmed"), ("checked_in_at__isnull", False)),
                            _connector="OR",
                        ),
                        name="checked_in_registration_is_confirmed",
                    ),
                ],
            },
        ),
    ]
