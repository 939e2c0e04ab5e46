from decouple import config

# Delivery retry policy for notification jobs.
NOTIFICATION_MAX_ATTEMPTS = config("NOTIFICATION_MAX_ATTEMPTS", default=5, cast=int)
NOTIFICATION_BACKOFF_BASE_SECONDS = config("NOTIFICATION_BACKOFF_BASE_SECONDS", default=5, cast=int)
NOTIFICATION_BACKOFF_MAX_SECONDS = config("NOTIFICATION_BACKOFF_MAX_SECONDS", default=300, cast=int)

# An in-flight job whose claim is older than this is considered abandoned by a dead worker.
NOTIFICATION_VISIBILITY_TIMEOUT_SECONDS = config("NOTIFICATION_VISIBILITY_TIMEOUT_SECONDS", default=600, cast=int)
NOTIFICATION_SWEEP_BATCH_SIZE = config("NOTIFICATION_SWEEP_BATCH_SIZE", default=500, cast=int)

# A due pending job older than this is assumed to have lost its broker message and is republished.
NOTIFICATION_REPUBLISH_GRACE_SECONDS = config("NOTIFICATION_REPUBLISH_GRACE_SECONDS", default=60, cast=int)
# A job the sweeper already republished is not republished again before this interval.
NOTIFICATION_REPUBLISH_INTERVAL_SECONDS = config("NOTIFICATION_REPUBLISH_INTERVAL_SECONDS", default=600, cast=int)
