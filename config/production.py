import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "site_checkin"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "site_checkin"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

SITE_TIMEZONE = os.getenv("SITE_TIMEZONE", "UTC")
DEFAULT_AUTO_SIGNOUT_TIME = os.getenv("DEFAULT_AUTO_SIGNOUT_TIME", "18:00:00")

SWEEP_INTERVAL_SECONDS = int(os.getenv("SWEEP_INTERVAL_SECONDS", "60"))
SWEEP_MAX_CATCHUP_DAYS = int(os.getenv("SWEEP_MAX_CATCHUP_DAYS", "31"))
SWEEP_RETRY_BASE_SECONDS = int(os.getenv("SWEEP_RETRY_BASE_SECONDS", "30"))
SWEEP_RETRY_MAX_SECONDS = int(os.getenv("SWEEP_RETRY_MAX_SECONDS", "900"))
CREDENTIAL_MAX_ATTEMPTS = int(os.getenv("CREDENTIAL_MAX_ATTEMPTS", "5"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Production runs the scheduler as its own process (scripts/run_scheduler.py)
RUN_SCHEDULER = bool(int(os.getenv("RUN_SCHEDULER", "0")))
