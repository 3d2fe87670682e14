"""
Creditline – Django Settings (Infrastructure Only)
===================================================
Django serves as the persistence container for Creditline.
The engines are plain Python; Django provides the ORM, migrations
and transaction/row-lock primitives used by the DB-backed stores.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get(
    "CREDITLINE_SECRET_KEY", "creditline-dev-key-replace-before-deployment"
)

DEBUG = os.environ.get("CREDITLINE_DEBUG", "1") == "1"

ALLOWED_HOSTS = []

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    # ── Creditline Modules ────────────────────────────────
    "core.credit_store",
]

MIDDLEWARE = []

# ── Database ──────────────────────────────────────────────────
# SQLite for development. Production DB configured separately.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("CREDITLINE_DB_PATH", BASE_DIR / "db.sqlite3"),
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# ── Default Primary Key ──────────────────────────────────────
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Credit Engine Rules ──────────────────────────────────────
# Parsed by core.config.load_engine_config().
CREDITLINE_ENGINE = {
    "min_lifetime_orders": int(os.environ.get("CREDITLINE_MIN_LIFETIME_ORDERS", "2")),
    "ineligible_loyalty_tiers": tuple(
        t.strip()
        for t in os.environ.get("CREDITLINE_INELIGIBLE_TIERS", "bronze").split(",")
        if t.strip()
    ),
    "faster_sla_multiplier": os.environ.get("CREDITLINE_FASTER_SLA_MULTIPLIER", "0.75"),
    "due_soon_days": int(os.environ.get("CREDITLINE_DUE_SOON_DAYS", "3")),
    "default_currency": os.environ.get("CREDITLINE_CURRENCY", "USD"),
}

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "loggers": {
        "creditline": {
            "handlers": ["console"],
            "level": os.environ.get("CREDITLINE_LOG_LEVEL", "INFO"),
        },
    },
}
