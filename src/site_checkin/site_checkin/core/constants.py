"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_AUTO_SIGNOUT_TIME = "18:00:00"
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_REPORT_DAYS = 7
MIN_PASSWORD_LENGTH = 8

CREDENTIAL_PREFIX = "SC1-"
CREDENTIAL_DIGEST_LENGTH = 40
CREDENTIAL_SALT_LENGTH = 24
DEFAULT_CREDENTIAL_MAX_ATTEMPTS = 5

DEFAULT_SITE_TIMEZONE = "UTC"
DEFAULT_SWEEP_INTERVAL_SECONDS = 60
DEFAULT_SWEEP_MAX_CATCHUP_DAYS = 31
DEFAULT_SWEEP_RETRY_BASE_SECONDS = 30
DEFAULT_SWEEP_RETRY_MAX_SECONDS = 900

# MySQL error code for duplicate key on a unique index.
ER_DUP_ENTRY = 1062
ER_NO_REFERENCED_ROW = 1452
