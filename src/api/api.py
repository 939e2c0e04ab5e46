from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import OperationalError
from django.http import HttpRequest
from ninja_extra import NinjaExtraAPI

from common.schema import ResponseOk, VersionResponse
from events.controllers import EVENT_CONTROLLERS
from events.exceptions import RegistrationError
from notifications.exceptions import NotificationEnqueueError

from .exception_handlers import (
    handle_django_validation_error,
    handle_general_exception,
    handle_notification_enqueue_error,
    handle_operational_error,
    handle_registration_error,
)

api = NinjaExtraAPI(
    title="Aivent Registration API",
    docs_url="/docs",
    version=settings.VERSION,
    description=f"Aivent API {settings.VERSION}",
    app_name=f"aivent-api-{settings.VERSION}",
    urls_namespace="api",
    servers=[
        {"url": settings.SERVICE_URL, "description": settings.SERVICE_DESCRIPTION},
    ],
)


@api.get("/version", tags=["Version"], response={200: VersionResponse})
def version(request: HttpRequest) -> tuple[int, VersionResponse]:
    """Get the API version.

    Args:
        request: The incoming HTTP request.

    Returns:
        The response status code and message.
    """
    return 200, VersionResponse(version=settings.VERSION)


@api.get("/healthcheck", tags=["Healthcheck"], response={200: ResponseOk})
def healthcheck(request: HttpRequest) -> tuple[int, ResponseOk]:
    """Check the health of the API.

    Args:
        request: The incoming HTTP request.

    Returns:
        The response status code and message.
    """
    return 200, ResponseOk()


api.register_controllers(
    # Event controllers (order matters, see EVENT_CONTROLLERS)
    *EVENT_CONTROLLERS,
)

EXCEPTION_HANDLERS = {
    Exception: handle_general_exception,
    ValidationError: handle_django_validation_error,
    OperationalError: handle_operational_error,
    RegistrationError: handle_registration_error,
    NotificationEnqueueError: handle_notification_enqueue_error,
}

for exc, handler in EXCEPTION_HANDLERS.items():
    api.add_exception_handler(exc, handler)
