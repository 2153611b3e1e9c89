"""
Test settings for SurveyBoard project.
"""
# Inherit from base, not local: no DEBUG logging noise and no file handlers.
from .base import *

# ============================================================
# BASIC TEST CONFIGURATION
# ============================================================
DEBUG = False
SECRET_KEY = 'test-secret-key-insecure-but-fast'

# ============================================================
# CACHE (in-memory for speed)
# ============================================================
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'unique-snowflake',
    }
}

# ============================================================
# DATABASE (in-memory SQLite)
# ============================================================
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# Lower DPI keeps chart rendering tests fast
CHART_DPI = 60

# ============================================================
# LOGGING (silent so the console stays clean)
# ============================================================
LOGGING = {
    'version': 1,
    'disable_existing_loggers': True,
    'handlers': {
        'null': {
            'class': 'logging.NullHandler',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['null'],
            'level': 'CRITICAL',
        },
        'core': {
            'handlers': ['null'],
            'level': 'CRITICAL',
        },
    },
}
