"""Settings for the test suite.

Tests run against PostgreSQL so the race tests exercise real row locking and
concurrent connections.
"""

from decouple import config

from aivent.settings import *  # noqa: F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": config("DB_NAME", default="aivent"),
        "USER": config("DB_USER", default="aivent"),
        "PASSWORD": config("DB_PASSWORD", default="aivent"),
        "HOST": config("DB_HOST", default="localhost"),
        "PORT": config("DB_PORT", default=5432, cast=int),
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
