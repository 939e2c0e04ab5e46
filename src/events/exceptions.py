class RegistrationError(Exception):
    """Base class for registration-core errors surfaced to the caller.

    ``status_code`` is the HTTP status the API maps the error to.
    """

    status_code: int = 400
    default_detail: str = "Registration error."

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class EventNotFoundError(RegistrationError):
    """Raised when the referenced event does not exist."""

    status_code = 404
    default_detail = "Event not found."


class RegistrationNotFoundError(RegistrationError):
    """Raised when a registration (or QR code) does not exist."""

    status_code = 404
    default_detail = "Registration not found."


class NotAuthorizedError(RegistrationError):
    """Raised when the caller may not act on the event or registration."""

    status_code = 403
    default_detail = "Not authorized."


class AlreadyRegisteredError(RegistrationError):
    """Raised when the user already holds a confirmed registration for the event."""

    status_code = 400
    default_detail = "Already registered."


class EventFullError(RegistrationError):
    """Raised when the event has no capacity left."""

    status_code = 409
    default_detail = "Event is full."


class AlreadyCheckedInError(RegistrationError):
    """Raised when the registration was already checked in."""

    status_code = 400
    default_detail = "Already checked in."


class AlreadyCancelledError(RegistrationError):
    """Raised when the registration was already cancelled."""

    status_code = 400
    default_detail = "Registration already cancelled."


class RegistrationCancelledError(RegistrationError):
    """Raised when checking in a cancelled registration."""

    status_code = 400
    default_detail = "This registration has been cancelled."


class EventDeletionAbortedError(RegistrationError):
    """Raised when attendee notifications could not be enqueued before deleting an event.

    The event and its registrations are left untouched; the caller may retry.
    """

    status_code = 503
    default_detail = "Event deletion aborted: attendees could not be notified. Please retry."
