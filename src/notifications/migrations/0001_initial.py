import uuid

import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies: list[tuple[str, str]] = []

    operations = [
        migrations.CreateModel(
            name="NotificationJob",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                (
                    "template_id",
                    models.CharField(
                        choices=[
                            ("REGISTRATION_ACCEPTED", "Registration Accepted"),
                            ("REGISTRATION_CANCELLED", "Registration Cancelled"),
                            ("EVENT_CANCELLED", "Event Cancelled"),
                            ("SUBSCRIPTION_SUCCESS", "Subscription Success"),
                        ],
                        db_index=True,
                        max_length=50,
                    ),
                ),
                ("recipient_email", models.EmailField(max_length=254)),
                (
                    "subject",
                    models.CharField(
                        blank=True, default="", help_text="Overrides the template subject", max_length=255
                    ),
                ),
                (
                    "params",
                    models.JSONField(blank=True, default=dict, help_text="Template parameters: {name: string value}"),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("in_flight", "In Flight"),
                            ("delivered", "Delivered"),
                            ("failed", "Failed"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "attempt",
                    models.PositiveIntegerField(default=0, help_text="Number of delivery attempts started"),
                ),
                ("last_error", models.TextField(blank=True, default="")),
                ("next_attempt_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                (
                    "claimed_at",
                    models.DateTimeField(blank=True, help_text="When the current attempt started", null=True),
                ),
                ("delivered_at", models.DateTimeField(blank=True, null=True)),
                ("failed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "dedupe_key",
                    models.CharField(
                        blank=True,
                        help_text="Producer-supplied key; enqueueing the same key twice yields the same job",
                        max_length=255,
                        null=True,
                        unique=True,
                    ),
                ),
            ],
            options={
                "verbose_name": "Notification Job",
                "verbose_name_plural": "Notification Jobs",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "next_attempt_at"], name="notifjob_status_next_idx"),
                    models.Index(fields=["status", "claimed_at"], name="notifjob_status_claimed_idx"),
                ],
            },
        ),
    ]
