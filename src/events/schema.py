"""Request and response schemas for registrations and event management."""

import typing as t
from decimal import Decimal
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import AwareDatetime, EmailStr, Field, StringConstraints

from common.schema import StrippedString
from events.models import Event, Registration

AttendeeName = t.Annotated[str, StringConstraints(min_length=1, max_length=255, strip_whitespace=True)]
QRCodeString = t.Annotated[str, StringConstraints(min_length=1, max_length=64, strip_whitespace=True)]


class RegisterSchema(Schema):
    event_id: UUID
    attendee_name: AttendeeName
    attendee_email: EmailStr


class CheckInSchema(Schema):
    qr_code: QRCodeString = Field(..., description="The token scanned from the attendee's QR code.")


class EventSummarySchema(ModelSchema):
    organizer_name: str

    class Meta:
        model = Event
        fields = [
            "id",
            "title",
            "venue",
            "map_link",
            "capacity",
            "registration_count",
            "ticket_type",
            "ticket_price",
            "currency",
            "start_at",
            "end_at",
        ]

    @staticmethod
    def resolve_organizer_name(obj: Event) -> str:
        return obj.organizer.display_name


class RegistrationSchema(ModelSchema):
    event_id: UUID
    registered_at: AwareDatetime

    class Meta:
        model = Registration
        fields = [
            "id",
            "attendee_name",
            "attendee_email",
            "qr_code",
            "status",
            "checked_in",
            "checked_in_at",
            "cancelled_at",
        ]


class UserTicketSchema(RegistrationSchema):
    event: EventSummarySchema


class CheckInResponse(Schema):
    success: bool = True
    attendee_name: str


class CheckRegistrationResponse(Schema):
    registered: bool
    registration: RegistrationSchema | None = None


class CancelRegistrationResponse(Schema):
    success: bool = True
    registration: RegistrationSchema


class EventDashboardSchema(Schema):
    event: EventSummarySchema
    total_registrations: int
    checked_in_count: int
    pending_count: int
    capacity: int
    seats_left: int
    check_in_rate: float = Field(..., description="Percentage of confirmed attendees already checked in.")
    total_revenue: Decimal = Field(..., description="Ticket price times confirmed registrations. Informational only.")
    currency: StrippedString
    hours_until_event: int
    is_event_today: bool
    is_event_past: bool
