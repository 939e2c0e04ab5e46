"""Exception handlers for the API."""

import traceback
import typing as t
from copy import deepcopy

import orjson
import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import OperationalError
from django.http import HttpRequest
from ninja.responses import Response

from events.exceptions import RegistrationError
from notifications.exceptions import NotificationEnqueueError

logger = structlog.get_logger(__name__)


def handle_general_exception(request: HttpRequest, exc: Exception | t.Type[Exception]) -> Response:
    """Handle a general exception.

    Args:
        request: The incoming HTTP request.
        exc: The exception.

    Returns:
        The response.
    """
    data = {"detail": "Internal Server Error."}
    tb_str = traceback.format_exc()
    is_staff = getattr(request, "user", None) and request.user.is_staff
    json_payload = None
    if request.method in ("POST", "PUT", "PATCH") and request.headers.get("Content-Type") == "application/json":
        try:
            payload = orjson.loads(request.body)
            json_payload = obfuscate(payload) if isinstance(payload, dict) else payload
        except orjson.JSONDecodeError:  # pragma: no cover
            json_payload = None
    logger.error(
        "INTERNAL_SERVER_ERROR",
        exc_info=exc if isinstance(exc, BaseException) else True,
        method=request.method,
        path=request.path,
        headers=obfuscate(dict(request.headers)),
        json_payload=json_payload,
    )
    if settings.DEBUG or is_staff:  # pragma: no cover
        data["traceback"] = tb_str
    return Response(status=500, data=data)


def handle_django_validation_error(request: HttpRequest, exc: ValidationError | t.Type[ValidationError]) -> Response:
    """Handle a validation error.

    Args:
        request: The incoming HTTP request.
        exc: The exception.
    """
    logger.warning("VALIDATION_ERROR", path=request.path, messages=getattr(exc, "messages", None))
    if hasattr(exc, "error_dict"):
        error_dict = {k: [ee for e in v for ee in e] for k, v in exc.error_dict.items()}
        return Response(status=400, data={"errors": error_dict})
    return Response(status=400, data={"detail": " ".join(getattr(exc, "messages", []))})


def handle_registration_error(request: HttpRequest, exc: RegistrationError | t.Type[RegistrationError]) -> Response:
    """Map a registration-core error to its HTTP status with a ``detail`` body."""
    return Response(status=exc.status_code, data={"detail": getattr(exc, "detail", exc.default_detail)})


def handle_operational_error(request: HttpRequest, exc: OperationalError | t.Type[OperationalError]) -> Response:
    """Transient database failure: nothing was committed, the client may retry."""
    logger.error("DATABASE_UNAVAILABLE", path=request.path, error=str(exc))
    return Response(status=503, data={"detail": "Service temporarily unavailable. Please retry."})


def handle_notification_enqueue_error(
    request: HttpRequest, exc: NotificationEnqueueError | t.Type[NotificationEnqueueError]
) -> Response:
    """The durable queue rejected a job."""
    logger.error("NOTIFICATION_QUEUE_UNAVAILABLE", path=request.path, error=str(exc))
    return Response(status=503, data={"detail": "Notifications are temporarily unavailable. Please retry."})


SENSITIVE_KEYS = {"password", "token", "x-api-key", "authorization", "authentication", "cookie"}


def obfuscate(data: dict[str, t.Any]) -> dict[str, t.Any]:
    """Obfuscate sensitive data in payloads and headers."""
    new_data = deepcopy(data)
    for key in data.keys():
        if key.lower() in SENSITIVE_KEYS:
            new_data[key] = "********"
    return new_data
