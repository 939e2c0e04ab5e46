import typing as t

from ninja_extra import ControllerBase

from accounts.models import AiventUser


class UserAwareController(ControllerBase):
    def user(self) -> AiventUser:
        """Get the user for this request."""
        return t.cast(AiventUser, self.context.request.user)  # type: ignore[union-attr]
