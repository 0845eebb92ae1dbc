"""Django settings for the drives API.

Values come from environment variables with development defaults.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.environ.get("DRIVES_SECRET_KEY", "dev-only-insecure-key")
DEBUG = env_bool("DRIVES_DEBUG", False)
ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get("DRIVES_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "drives.apps.DrivesConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "config.urls"
WSGI_APPLICATION = "config.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": os.environ.get("DRIVES_DB_ENGINE", "django.db.backends.sqlite3"),
        "NAME": os.environ.get("DRIVES_DB_NAME", str(BASE_DIR / "db.sqlite3")),
        "USER": os.environ.get("DRIVES_DB_USER", ""),
        "PASSWORD": os.environ.get("DRIVES_DB_PASSWORD", ""),
        "HOST": os.environ.get("DRIVES_DB_HOST", ""),
        "PORT": os.environ.get("DRIVES_DB_PORT", ""),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "drives",
    }
}

USE_TZ = True
TIME_ZONE = "UTC"
LANGUAGE_CODE = "en-us"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "drives.handlers.authentication.TrustedHeaderAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticatedOrReadOnly",
    ],
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "EXCEPTION_HANDLER": "drives.handlers.errors.domain_exception_handler",
    "TEST_REQUEST_DEFAULT_FORMAT": "json",
}

DRIVES = {
    "ACTOR_HEADER": os.environ.get("DRIVES_ACTOR_HEADER", "X-User-Id"),
    "ACTOR_EMAIL_HEADER": os.environ.get("DRIVES_ACTOR_EMAIL_HEADER", "X-User-Email"),
    "REFERENCE_CACHE_TIMEOUT": int(os.environ.get("DRIVES_REFERENCE_CACHE_TIMEOUT", "300")),
}

LOG_LEVEL = os.environ.get("DRIVES_LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
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
        "drives": {
            "level": LOG_LEVEL,
        },
    },
}
