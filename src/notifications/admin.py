"""Django admin for notification jobs."""

from django.contrib import admin, messages
from django.db.models import QuerySet
from django.http import HttpRequest
from django.utils.html import format_html
from unfold.admin import ModelAdmin

from notifications.models import NotificationJob
from notifications.service.queue import requeue_failed_jobs


@admin.register(NotificationJob)
class NotificationJobAdmin(ModelAdmin):  # type: ignore[type-arg,misc]
    """Admin for NotificationJob.

    Dead-lettered jobs are listed under the ``failed`` status filter and can be
    requeued with the bulk action.
    """

    list_display = [
        "id",
        "template_id",
        "recipient_email",
        "status_colored",
        "attempt",
        "next_attempt_at",
        "created_at",
    ]
    list_filter = [
        "status",
        "template_id",
        "created_at",
    ]
    search_fields = [
        "recipient_email",
        "dedupe_key",
        "last_error",
    ]
    readonly_fields = [
        "id",
        "template_id",
        "recipient_email",
        "subject",
        "params",
        "status",
        "attempt",
        "last_error",
        "next_attempt_at",
        "claimed_at",
        "republished_at",
        "delivered_at",
        "failed_at",
        "dedupe_key",
        "created_at",
        "updated_at",
    ]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]
    actions = ["requeue_selected"]

    fieldsets = (
        (
            "Message",
            {
                "fields": (
                    "id",
                    "template_id",
                    "recipient_email",
                    "subject",
                    "params",
                    "dedupe_key",
                )
            },
        ),
        (
            "Delivery",
            {
                "fields": (
                    "status",
                    "attempt",
                    "last_error",
                    "next_attempt_at",
                    "claimed_at",
                    "republished_at",
                    "delivered_at",
                    "failed_at",
                )
            },
        ),
        (
            "Timestamps",
            {
                "fields": (
                    "created_at",
                    "updated_at",
                ),
                "classes": ("collapse",),
            },
        ),
    )

    def has_add_permission(self, request: HttpRequest) -> bool:
        """Jobs are only created by producers."""
        return False

    def status_colored(self, obj: NotificationJob) -> str:
        """Get colored status."""
        color_map = {
            "pending": "orange",
            "in_flight": "blue",
            "delivered": "green",
            "failed": "red",
        }
        color = color_map.get(obj.status, "black")
        return format_html('<span style="color: {};">{}</span>', color, obj.status.upper())

    status_colored.short_description = "Status"  # type: ignore[attr-defined]

    @admin.action(description="Requeue selected failed jobs")
    def requeue_selected(self, request: HttpRequest, queryset: QuerySet[NotificationJob]) -> None:
        """Give failed jobs a fresh retry budget."""
        count = requeue_failed_jobs(queryset)
        self.message_user(request, f"Requeued {count} failed job(s).", messages.SUCCESS)
