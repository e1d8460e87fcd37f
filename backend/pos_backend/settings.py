"""
Django settings for the pos_backend project.

The pricing & totals core keeps no database state of its own: catalog, order
and purchase-order records live in external services reached over HTTP, and
the POS cart is kept in the cache framework between requests.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "insecure-development-key")

DEBUG = os.environ.get("DJANGO_DEBUG", "true").lower() in ("1", "true", "yes")

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "pos_backend",
    "products",
    "payments",
    "cart",
    "orders",
    "procurement",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "pos_backend.urls"

WSGI_APPLICATION = "pos_backend.wsgi.application"

# No models are defined; the database is only here to satisfy Django.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "pos-core",
    }
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("POS_TIME_ZONE", "Asia/Jakarta")
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Authentication and role checks happen upstream of this service.
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
    "EXCEPTION_HANDLER": "pos_backend.exceptions.pos_exception_handler",
}

# === POS CORE SETTINGS ===
POS_CURRENCY = os.environ.get("POS_CURRENCY", "IDR")
POS_DEFAULT_TAX_RATE = os.environ.get("POS_DEFAULT_TAX_RATE", "0.11")

POS_ORDER_SERVICE_URL = os.environ.get("POS_ORDER_SERVICE_URL", "http://localhost:3000/api/pos/orders")
POS_PROCUREMENT_SERVICE_URL = os.environ.get(
    "POS_PROCUREMENT_SERVICE_URL", "http://localhost:3000/api/procurements/purchase-orders"
)
POS_REMOTE_TIMEOUT = int(os.environ.get("POS_REMOTE_TIMEOUT", "30"))

POS_CART_STORAGE_KEY = "pos.cart.v1"
POS_CART_STORAGE_TIMEOUT = int(os.environ.get("POS_CART_STORAGE_TIMEOUT", str(60 * 60 * 24)))
POS_PURCHASE_ORDER_CACHE_TIMEOUT = int(os.environ.get("POS_PURCHASE_ORDER_CACHE_TIMEOUT", str(60 * 15)))

POS_LOG_LEVEL = os.environ.get("POS_LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
        **{
            app: {"handlers": ["console"], "level": POS_LOG_LEVEL, "propagate": False}
            for app in ("pos_backend", "products", "payments", "cart", "orders", "procurement")
        },
    },
}
