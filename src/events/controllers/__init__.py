from .events import EventManagementController
from .registrations import RegistrationController

# Controllers in order to preserve path resolution.
# Non-event_id routes (register, check-in, user/tickets, registrations/...) come first
# so they are never matched by the /{uuid:event_id} patterns.
EVENT_CONTROLLERS: list[type] = [
    RegistrationController,
    EventManagementController,
]

__all__ = [
    "EventManagementController",
    "RegistrationController",
    "EVENT_CONTROLLERS",
]
