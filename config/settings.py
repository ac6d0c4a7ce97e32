"""
Tradebook – Django Settings (Infrastructure Only)
==================================================
Django hosts the store models and the JSON adapter. Business rules
live in core/ and engines/ and never read these settings directly;
adapters resolve TRADEBOOK values and pass them down.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get(
    "TRADEBOOK_SECRET_KEY", "tradebook-dev-key-replace-before-deployment",
)

DEBUG = os.environ.get("TRADEBOOK_DEBUG", "1") == "1"

ALLOWED_HOSTS = ["*"] if DEBUG else os.environ.get(
    "TRADEBOOK_ALLOWED_HOSTS", "",
).split(",")

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "core.event_store.apps.EventStoreConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

# ── URL ───────────────────────────────────────────────────────
ROOT_URLCONF = "config.urls"

# ── Database ──────────────────────────────────────────────────
# SQLite by default; sale and voucher writes lock rows inside
# transaction.atomic, which SQLite serializes per database.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("TRADEBOOK_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Logging ───────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("TRADEBOOK_LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "plain",
        },
    },
    "loggers": {
        "tradebook": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": True,
        },
    },
}

# ── Tradebook ─────────────────────────────────────────────────
TRADEBOOK = {
    "BUSINESS_NAME": os.environ.get("TRADEBOOK_BUSINESS_NAME", "Tradebook"),
    "CURRENCY": "INR",
    "PURCHASE_INVOICE_PREFIX": "PUR",
    "SALE_INVOICE_PREFIX": "SAL",
    "PRODUCT_ID_PREFIX": "PRD",
    "CUSTOMER_ID_PREFIX": "CUS",
    "SUPPLIER_ID_PREFIX": "SUP",
    # Category-level GST overrides; a product's own gst_percent applies
    # when no rule names its category.
    "GST_RULES": [],
}
