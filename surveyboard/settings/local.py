from .base import *
from decouple import config

# ============================================================
# LOCAL DEVELOPMENT
# ============================================================

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1']

# Charts are cheap to regenerate while iterating on styles
CHART_CACHE_TIMEOUT = config('CHART_CACHE_TIMEOUT', default=60, cast=int)

LOGGING['handlers']['console']['level'] = 'DEBUG'
LOGGING['loggers']['core']['level'] = 'DEBUG'
