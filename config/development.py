import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "site_checkin"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Daily cutoffs are evaluated in this zone for every site.
SITE_TIMEZONE = os.getenv("SITE_TIMEZONE", "UTC")
DEFAULT_AUTO_SIGNOUT_TIME = os.getenv("DEFAULT_AUTO_SIGNOUT_TIME", "18:00:00")

SWEEP_INTERVAL_SECONDS = int(os.getenv("SWEEP_INTERVAL_SECONDS", "60"))
SWEEP_MAX_CATCHUP_DAYS = int(os.getenv("SWEEP_MAX_CATCHUP_DAYS", "31"))
SWEEP_RETRY_BASE_SECONDS = int(os.getenv("SWEEP_RETRY_BASE_SECONDS", "30"))
SWEEP_RETRY_MAX_SECONDS = int(os.getenv("SWEEP_RETRY_MAX_SECONDS", "900"))
CREDENTIAL_MAX_ATTEMPTS = int(os.getenv("CREDENTIAL_MAX_ATTEMPTS", "5"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo accounts and a demo site on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Start the auto sign-out scheduler inside the web process (app.py only)
RUN_SCHEDULER = bool(int(os.getenv("RUN_SCHEDULER", "1")))
