from .base import *  # noqa: F401,F403
from .celery import *  # noqa: F401,F403
from .email import *  # noqa: F401,F403
from .logging_config import *  # noqa: F401,F403
from .ninja import *  # noqa: F401,F403
from .notifications import *  # noqa: F401,F403
