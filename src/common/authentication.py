import typing as t

import structlog
from django.http import HttpRequest
from ninja_jwt.authentication import JWTAuth


class AiventJWTAuth(JWTAuth):
    """JWT authentication that binds the caller to the logging context.

    Sessions and credentials are issued elsewhere; this service only verifies the
    bearer token and resolves the caller.

    Usage:
        @api_controller("/events", auth=AiventJWTAuth())
        class RegistrationController:
            ...
    """

    def authenticate(self, request: HttpRequest, token: str) -> t.Any:
        """Authenticate the request and bind user_id for structured logs.

        Raises:
            AuthenticationFailed: If authentication fails
            InvalidToken: If the token is invalid
        """
        user = super().authenticate(request, token)
        if user is not None:
            structlog.contextvars.bind_contextvars(user_id=str(user.pk))
        return user
