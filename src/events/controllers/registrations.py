from uuid import UUID

from django.http import HttpResponse
from ninja_extra import api_controller, route

from common.authentication import AiventJWTAuth
from common.controllers import UserAwareController
from events import models, schema
from events.service import qr_tokens, registration_service


@api_controller("/events", auth=AiventJWTAuth(), tags=["Registrations"])
class RegistrationController(UserAwareController):
    """Attendee-facing registration, ticket and check-in endpoints."""

    @route.post("/register", url_name="register", response={201: schema.RegistrationSchema})
    def register(self, payload: schema.RegisterSchema) -> tuple[int, models.Registration]:
        """Reserve a seat at an event for the authenticated user.

        Returns 400 if you already hold a confirmed registration, 409 if the event is
        full and 404 if it does not exist. The ticket, with its check-in QR code, is
        emailed to `attendee_email` asynchronously.
        """
        registration = registration_service.register(
            payload.event_id,
            self.user(),
            attendee_name=payload.attendee_name,
            attendee_email=payload.attendee_email,
        )
        return 201, registration

    @route.post("/check-in", url_name="check_in", response=schema.CheckInResponse)
    def check_in(self, payload: schema.CheckInSchema) -> schema.CheckInResponse:
        """Check an attendee in by the token scanned from their QR code.

        Only the event organizer may check in. Each registration can be checked in
        once; further scans return 400.
        """
        attendee_name = registration_service.check_in(payload.qr_code, self.user())
        return schema.CheckInResponse(attendee_name=attendee_name)

    @route.get("/user/tickets", url_name="list_user_tickets", response=list[schema.UserTicketSchema])
    def list_user_tickets(self) -> list[models.Registration]:
        """List your registrations, newest first, including cancelled ones."""
        return list(registration_service.list_user_registrations(self.user()))

    @route.post(
        "/registrations/{uuid:registration_id}/cancel",
        url_name="cancel_registration",
        response=schema.CancelRegistrationResponse,
    )
    def cancel_registration(self, registration_id: UUID) -> schema.CancelRegistrationResponse:
        """Cancel a registration and release its seat.

        Allowed for the attendee and for the event organizer. Checked-in
        registrations cannot be cancelled.
        """
        registration = registration_service.cancel(registration_id, self.user())
        return schema.CancelRegistrationResponse(registration=schema.RegistrationSchema.from_orm(registration))

    @route.get("/registrations/{uuid:registration_id}/qr", url_name="registration_qr")
    def registration_qr(self, registration_id: UUID) -> HttpResponse:
        """Download the check-in QR code of a registration as a PNG.

        Visible to the attendee and to the event organizer.
        """
        registration = registration_service.get_registration_for_ticket(registration_id, self.user())
        response = HttpResponse(qr_tokens.render_qr_png(registration.qr_code), content_type="image/png")
        response["Content-Disposition"] = f'inline; filename="ticket-{registration.id}.png"'
        return response
