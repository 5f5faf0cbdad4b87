"""
Django base settings for the Contest Tracker service.

This module contains settings common to all environments.
For more information on this file, see
https://docs.djangoproject.com/en/4.2/topics/settings/
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent


# Quick-start development settings - unsuitable for production
# See https://docs.djangoproject.com/en/4.2/howto/deployment/checklist/

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.getenv(
    "SECRET_KEY",
    "django-insecure-contest-tracker-dev-key-change-in-production"
)

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = os.getenv("DEBUG", "True") == "True"

ALLOWED_HOSTS = os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")


# Application definition

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third-party apps
    "rest_framework",
    "drf_spectacular",
    # Local apps
    "contests",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "config.wsgi.application"


# Database
# https://docs.djangoproject.com/en/4.2/ref/settings/#databases
# Configured in environment-specific settings (development.py, production.py, test.py)

DATABASES = {
    # Override in environment-specific settings
}


# Password validation
# https://docs.djangoproject.com/en/4.2/ref/settings/#auth-password-validators

AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.MinimumLengthValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.CommonPasswordValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.NumericPasswordValidator",
    },
]


# Internationalization
# https://docs.djangoproject.com/en/4.2/topics/i18n/

LANGUAGE_CODE = "en-us"

TIME_ZONE = "UTC"

USE_I18N = True

USE_TZ = True


# Static files (CSS, JavaScript, Images)
# https://docs.djangoproject.com/en/4.2/howto/static-files/

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Default primary key field type
# https://docs.djangoproject.com/en/4.2/ref/settings/#default-auto-field

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# Cache Configuration
# https://docs.djangoproject.com/en/4.2/topics/cache/
# Configured in environment-specific settings

CACHES = {
    # Override in environment-specific settings
}


# Celery Configuration
# https://docs.celeryproject.org/en/stable/django/first-steps-with-django.html

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/1")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/1")
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"
CELERY_TIMEZONE = TIME_ZONE
CELERY_TASK_TRACK_STARTED = True
CELERY_TASK_TIME_LIMIT = 10 * 60  # 10 minutes max for a refresh cycle

CELERY_TASK_ROUTES = {
    "contests.tasks.refresh_*": {"queue": "refresh"},
}


# Django REST Framework Configuration
# https://www.django-rest-framework.org/

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
        "rest_framework.authentication.BasicAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}


# DRF Spectacular (OpenAPI/Swagger) Configuration
# https://drf-spectacular.readthedocs.io/

SPECTACULAR_SETTINGS = {
    "TITLE": "Contest Tracker API",
    "DESCRIPTION": "Unified programming contest feed for Codeforces, CodeChef and LeetCode",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
}


# Logging Configuration
# https://docs.djangoproject.com/en/4.2/topics/logging/

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {module} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": os.getenv("LOG_LEVEL", "INFO"),
        },
        "contests": {
            "handlers": ["console"],
            "level": os.getenv("LOG_LEVEL", "INFO"),
        },
    },
}


# Sentry Configuration
# https://docs.sentry.io/platforms/python/guides/django/

SENTRY_DSN = os.getenv("SENTRY_DSN", "")
SENTRY_ENVIRONMENT = os.getenv("SENTRY_ENVIRONMENT", "development")
SENTRY_TRACES_SAMPLE_RATE = float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.2"))

# Initialize Sentry
import sentry_sdk

if SENTRY_DSN:
    sentry_sdk.init(
        dsn=SENTRY_DSN,
        send_default_pii=False,
        traces_sample_rate=SENTRY_TRACES_SAMPLE_RATE,
        environment=SENTRY_ENVIRONMENT,
    )


# Contest Source Configuration

# Sources invoked on every refresh cycle (see contests.sources.get_source)
CONTESTS_SOURCES = [
    s.strip()
    for s in os.getenv("CONTESTS_SOURCES", "codeforces,codechef,leetcode,past_contests").split(",")
    if s.strip()
]

# Default timeout for a single outbound HTTP request (seconds)
CONTESTS_REQUEST_TIMEOUT = float(os.getenv("CONTESTS_REQUEST_TIMEOUT", "15"))

# Upper bound for one source's whole fetch, retries included (seconds)
CONTESTS_SOURCE_TIMEOUT = float(os.getenv("CONTESTS_SOURCE_TIMEOUT", "45"))

# Retries for connect/read errors on outbound requests
CONTESTS_HTTP_MAX_RETRIES = int(os.getenv("CONTESTS_HTTP_MAX_RETRIES", "2"))
CONTESTS_HTTP_RETRY_DELAY = float(os.getenv("CONTESTS_HTTP_RETRY_DELAY", "1.0"))

# Stored data older than this triggers a refresh on read (seconds)
CONTESTS_STALENESS_SECONDS = int(os.getenv("CONTESTS_STALENESS_SECONDS", "3600"))

# Finished contests older than this are dropped by the sources (days)
CONTESTS_RETENTION_DAYS = int(os.getenv("CONTESTS_RETENTION_DAYS", "30"))

# Maximum past contests returned by the feed
CONTESTS_PAST_LIMIT = int(os.getenv("CONTESTS_PAST_LIMIT", "50"))

# Maximum recently finished CodeChef contests kept per refresh
CONTESTS_CODECHEF_PAST_LIMIT = int(os.getenv("CONTESTS_CODECHEF_PAST_LIMIT", "10"))

# Repository retries for transient database errors
CONTESTS_DB_MAX_RETRIES = int(os.getenv("CONTESTS_DB_MAX_RETRIES", "3"))
CONTESTS_DB_RETRY_DELAY = float(os.getenv("CONTESTS_DB_RETRY_DELAY", "0.5"))

# HTML contest aggregator page scraped for past contests (empty disables it)
PAST_CONTESTS_URL = os.getenv("PAST_CONTESTS_URL", "")


# Solution Video Configuration (YouTube Data API v3)

YOUTUBE_API_KEY = os.getenv("YOUTUBE_API_KEY", "")

# Platform -> playlist ID; platforms without a playlist are skipped
YOUTUBE_PLAYLISTS = {
    platform: playlist_id
    for platform, playlist_id in {
        "LeetCode": os.getenv("LEETCODE_PLAYLIST_ID", ""),
        "Codeforces": os.getenv("CODEFORCES_PLAYLIST_ID", ""),
        "CodeChef": os.getenv("CODECHEF_PLAYLIST_ID", ""),
    }.items()
    if playlist_id
}
