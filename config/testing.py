import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "site_checkin_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

SITE_TIMEZONE = "UTC"
DEFAULT_AUTO_SIGNOUT_TIME = "18:00:00"

SWEEP_INTERVAL_SECONDS = 60
SWEEP_MAX_CATCHUP_DAYS = 31
SWEEP_RETRY_BASE_SECONDS = 30
SWEEP_RETRY_MAX_SECONDS = 900
CREDENTIAL_MAX_ATTEMPTS = 5

AUTO_INIT_DB = False
AUTO_SEED_DB = False
RUN_SCHEDULER = False
