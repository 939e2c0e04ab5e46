import re
import uuid

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models


class AiventUserQueryset(models.QuerySet["AiventUser"]):
    """Queryset for AiventUser."""


class AiventUserManager(UserManager["AiventUser"]):
    def get_queryset(self) -> AiventUserQueryset:
        """Get queryset for AiventUser."""
        return AiventUserQueryset(self.model)


class AiventUser(AbstractUser):
    """The user reference consumed by the registration core.

    Identity and credentials are owned by the auth collaborator; this model only
    carries what registrations and notifications need: id, display name and email.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    preferred_name = models.CharField(db_index=True, max_length=255, blank=True, help_text="Preferred name")

    objects = AiventUserManager()  # type: ignore[misc]

    class Meta:
        ordering = ["username"]

    @property
    def display_name(self) -> str:
        """Display name."""
        return self.get_display_name()

    def get_display_name(self) -> str:
        """Returns the user's preferred name, or their full name as a fallback."""
        return (
            self.preferred_name or self.get_full_name() or re.sub(r"(\W|_)+", " ", self.username.split("@")[0]).title()
        )
