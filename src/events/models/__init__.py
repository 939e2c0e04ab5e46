from .event import Event, EventQuerySet
from .registration import Registration, RegistrationQuerySet

__all__ = [
    "Event",
    "EventQuerySet",
    "Registration",
    "RegistrationQuerySet",
]
