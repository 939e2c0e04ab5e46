import typing as t

from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html
from unfold.admin import ModelAdmin, TabularInline

from . import models


# --- Helper Mixins for Reusable Link Fields ---
class UserLinkMixin:
    """Mixin to add a link to a user."""

    def user_link(self, obj: t.Any) -> str:
        user = obj.user
        url = reverse("admin:accounts_aiventuser_change", args=[user.id])
        return format_html('<a href="{}">{}</a>', url, user.username)

    user_link.short_description = "User"  # type: ignore[attr-defined]


class EventLinkMixin:
    """Mixin to add a link to an event."""

    def event_link(self, obj: t.Any) -> str | None:
        if not getattr(obj, "event", None):
            return None
        url = reverse("admin:events_event_change", args=[obj.event.id])
        return format_html('<a href="{}">{}</a>', url, obj.event.title)

    event_link.short_description = "Event"  # type: ignore[attr-defined]


class RegistrationInline(TabularInline):  # type: ignore[misc]
    model = models.Registration
    extra = 0
    fields = ["attendee_name", "attendee_email", "status", "checked_in", "checked_in_at", "created_at"]
    readonly_fields = fields
    can_delete = False
    show_change_link = True

    def has_add_permission(self, request: t.Any, obj: t.Any = None) -> bool:
        return False


@admin.register(models.Event)
class EventAdmin(ModelAdmin):  # type: ignore[misc]
    """Admin model for Events.

    The seat counter is read-only here; it only moves through the registration service.
    """

    list_display = ["title", "organizer", "start_at", "seats", "ticket_type"]
    list_filter = ["ticket_type", "start_at"]
    search_fields = ["title", "venue", "organizer__username", "organizer__email"]
    autocomplete_fields = ["organizer"]
    readonly_fields = ["registration_count", "created_at", "updated_at"]
    date_hierarchy = "start_at"

    fieldsets = [
        (
            "Details",
            {
                "fields": (
                    "organizer",
                    "title",
                    ("venue", "map_link"),
                    ("start_at", "end_at"),
                )
            },
        ),
        (
            "Tickets",
            {
                "fields": (
                    ("capacity", "registration_count"),
                    ("ticket_type", "ticket_price", "currency"),
                )
            },
        ),
    ]

    inlines = [RegistrationInline]

    @admin.display(description="Seats")
    def seats(self, obj: models.Event) -> str:
        return f"{obj.registration_count}/{obj.capacity}"


@admin.register(models.Registration)
class RegistrationAdmin(ModelAdmin, UserLinkMixin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["id", "event_link", "user_link", "attendee_name", "status", "checked_in", "created_at"]
    list_filter = ["status", "checked_in", "created_at"]
    search_fields = ["attendee_name", "attendee_email", "qr_code", "event__title", "user__username"]
    readonly_fields = [
        "id",
        "event",
        "user",
        "qr_code",
        "status",
        "checked_in",
        "checked_in_at",
        "checked_in_by",
        "cancelled_at",
        "created_at",
    ]
    fields = ["attendee_name", "attendee_email", *readonly_fields]
    date_hierarchy = "created_at"
    list_select_related = ["event", "user"]

    def has_add_permission(self, request: t.Any) -> bool:
        return False
