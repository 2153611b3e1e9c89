"""
Django settings for surveyboard project.
Shared by every environment; local.py and test.py override on top of this.
"""

from pathlib import Path
from decouple import config
import os

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = config('SECRET_KEY', default='insecure-surveyboard-dev-key')

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = config('DEBUG', default=False, cast=bool)

ALLOWED_HOSTS = []


# Application definition

INSTALLED_APPS = [
    'django.contrib.contenttypes',

    # --- Project apps ---
    'core.apps.CoreConfig',
]


# Database
DATABASES = {
    'default': {
        'ENGINE': config('DB_ENGINE', default='django.db.backends.sqlite3'),
        'NAME': config('DB_NAME', default=str(BASE_DIR / 'db.sqlite3')),
    }
}


# Internationalization
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# ============================================================
# CACHE (rendered chart images)
# ============================================================
CACHES = {
    'default': {
        'BACKEND': config('CACHE_BACKEND', default='django.core.cache.backends.locmem.LocMemCache'),
        'LOCATION': config('CACHE_LOCATION', default='surveyboard-charts'),
    }
}


# ============================================================
# ANALYTICS / CHARTS
# ============================================================
CHART_CACHE_TIMEOUT = config('CHART_CACHE_TIMEOUT', default=3600, cast=int)
CHART_DARK_MODE = config('CHART_DARK_MODE', default=False, cast=bool)
CHART_DPI = config('CHART_DPI', default=140, cast=int)
TEXT_TOP_WORDS_LIMIT = config('TEXT_TOP_WORDS_LIMIT', default=30, cast=int)
SLOW_OPERATION_THRESHOLD_MS = config('SLOW_OPERATION_THRESHOLD_MS', default=1000.0, cast=float)


# ============================================================
# LOGGING CONFIGURATION
# ============================================================
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': { 'format': '[{levelname}] {asctime} {name} {module}.{funcName}:{lineno} - {message}', 'style': '{', 'datefmt': '%Y-%m-%d %H:%M:%S', },
        'detailed': { 'format': '{asctime} | {name:30} | {levelname:8} | {funcName:20} | {message}', 'style': '{', 'datefmt': '%Y-%m-%d %H:%M:%S', },
    },
    'handlers': {
        'console': { 'level': 'DEBUG' if DEBUG else 'INFO', 'class': 'logging.StreamHandler', 'formatter': 'detailed', },
        'file_app': { 'level': 'INFO', 'class': 'logging.handlers.RotatingFileHandler', 'filename': BASE_DIR / 'logs' / 'app.log', 'maxBytes': 1024 * 1024 * 10, 'backupCount': 5, 'formatter': 'detailed', },
        'file_error': { 'level': 'ERROR', 'class': 'logging.handlers.RotatingFileHandler', 'filename': BASE_DIR / 'logs' / 'error.log', 'maxBytes': 1024 * 1024 * 10, 'backupCount': 5, 'formatter': 'verbose', },
    },
    'loggers': {
        'django': { 'handlers': ['console', 'file_app'], 'level': 'INFO', 'propagate': False, },
        'core': { 'handlers': ['console', 'file_app', 'file_error'], 'level': 'DEBUG' if DEBUG else 'INFO', 'propagate': False, },
    },
    'root': { 'handlers': ['console'], 'level': 'WARNING', },
}

# Ensure logs dir exists
logs_dir = BASE_DIR / 'logs'
if not os.path.exists(logs_dir):
    os.makedirs(logs_dir)
