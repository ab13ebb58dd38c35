"""
Django settings for the unireg project.

Runtime values are read from UNIREG_* environment variables so the same
settings module serves development, tests and deployment.

For more information on this file, see
https://docs.djangoproject.com/en/5.2/topics/settings/
"""

import os
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

# Django apps live under apps/ and are imported by their short names
# (``academics``, ``enrollment``, ...).
APPS_DIR = BASE_DIR / 'apps'
if str(APPS_DIR) not in sys.path:
    sys.path.insert(0, str(APPS_DIR))


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


SECRET_KEY = os.environ.get('UNIREG_SECRET_KEY', 'unireg-insecure-development-key')

DEBUG = _env_bool('UNIREG_DEBUG', default=False)

ALLOWED_HOSTS = [h for h in os.environ.get('UNIREG_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',') if h]


# =============================================================================
# APPLICATIONS
# =============================================================================

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',

    # Project apps
    'utils',
    'core',
    'students',
    'academics',
    'grading',
    'enrollment',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'utils.middleware.AuditContextMiddleware',
]


# =============================================================================
# DATABASE
# =============================================================================

DB_ENGINE = os.environ.get('UNIREG_DB_ENGINE', 'sqlite')

# Seconds a writer waits for a row/database lock before the request fails
# with a retryable timeout.
DB_TIMEOUT = int(os.environ.get('UNIREG_DB_TIMEOUT', '20'))

if DB_ENGINE == 'postgresql':
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': os.environ.get('UNIREG_DB_NAME', 'unireg'),
            'USER': os.environ.get('UNIREG_DB_USER', 'unireg'),
            'PASSWORD': os.environ.get('UNIREG_DB_PASSWORD', ''),
            'HOST': os.environ.get('UNIREG_DB_HOST', 'localhost'),
            'PORT': os.environ.get('UNIREG_DB_PORT', '5432'),
            'OPTIONS': {
                'options': f'-c lock_timeout={DB_TIMEOUT * 1000}',
            },
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': os.environ.get('UNIREG_DB_NAME', str(BASE_DIR / 'db.sqlite3')),
            'OPTIONS': {
                # BEGIN IMMEDIATE: writers queue on the busy timeout instead
                # of failing when a read lock is upgraded mid-transaction.
                'transaction_mode': 'IMMEDIATE',
                'timeout': DB_TIMEOUT,
            },
            'TEST': {
                # File-backed so threaded tests get independent connections.
                'NAME': str(BASE_DIR / 'test_unireg.sqlite3'),
            },
        }
    }

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# =============================================================================
# CACHE
# =============================================================================

# Cached grade scales are checked against the band table on every load.
CACHES = {
    'default': {
        'BACKEND': os.environ.get(
            'UNIREG_CACHE_BACKEND', 'django.core.cache.backends.locmem.LocMemCache'
        ),
        'LOCATION': os.environ.get('UNIREG_CACHE_LOCATION', 'unireg-default'),
    }
}

GRADE_SCALE_CACHE_TIMEOUT = int(os.environ.get('UNIREG_GRADE_SCALE_CACHE_TIMEOUT', '3600'))


# =============================================================================
# INTERNATIONALIZATION
# =============================================================================

LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('UNIREG_TIME_ZONE', 'UTC')
USE_I18N = True
USE_TZ = True


# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.environ.get('UNIREG_LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'filters': {
        'request_context': {
            '()': 'utils.context.RequestContextFilter',
        },
    },
    'formatters': {
        'verbose': {
            'format': '%(asctime)s %(levelname)s %(name)s [user=%(user_id)s ip=%(ip)s] %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'filters': ['request_context'],
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        app: {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        }
        for app in ('utils', 'core', 'students', 'academics', 'grading', 'enrollment', 'unireg')
    },
}
