"""WSGI config for the aivent project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "aivent.settings")

application = get_wsgi_application()
