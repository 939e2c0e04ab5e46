import typing as t
from uuid import UUID

from ninja_extra import api_controller, route

from common.authentication import AiventJWTAuth
from common.controllers import UserAwareController
from common.schema import SuccessResponse
from events import models, schema
from events.service import dashboard_service, event_lifecycle, registration_service


@api_controller("/events", auth=AiventJWTAuth(), tags=["Events"])
class EventManagementController(UserAwareController):
    """Per-event endpoints: registration status, attendee list, dashboard and deletion."""

    @route.get(
        "/{uuid:event_id}/check-registration",
        url_name="check_registration",
        response=schema.CheckRegistrationResponse,
    )
    def check_registration(self, event_id: UUID) -> schema.CheckRegistrationResponse:
        """Check whether you hold a confirmed registration for the event."""
        registration = registration_service.check_status(event_id, self.user())
        return schema.CheckRegistrationResponse(
            registered=registration is not None,
            registration=schema.RegistrationSchema.from_orm(registration) if registration else None,
        )

    @route.get(
        "/{uuid:event_id}/registrations",
        url_name="list_event_registrations",
        response=list[schema.RegistrationSchema],
    )
    def list_event_registrations(self, event_id: UUID) -> list[models.Registration]:
        """List every registration of an event you organize, newest first."""
        return list(registration_service.list_event_registrations(event_id, self.user()))

    @route.get("/{uuid:event_id}/dashboard", url_name="event_dashboard", response=schema.EventDashboardSchema)
    def event_dashboard(self, event_id: UUID) -> dict[str, t.Any]:
        """Attendance and revenue stats for an event you organize.

        Revenue is informational; no payments are processed.
        """
        return dashboard_service.get_event_dashboard(event_id, self.user())._asdict()

    @route.delete("/{uuid:event_id}", url_name="delete_event", response=SuccessResponse)
    def delete_event(self, event_id: UUID) -> SuccessResponse:
        """Delete an event you organize, together with all of its registrations.

        Every confirmed attendee is emailed first. If those emails cannot be queued the
        event is left untouched and 503 is returned; retrying is safe. This cannot be undone.
        """
        event_lifecycle.delete_event(event_id, self.user())
        return SuccessResponse()
