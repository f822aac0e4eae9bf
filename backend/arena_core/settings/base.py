# arena_core/settings/base.py

from pathlib import Path
from datetime import timedelta
import os
import logging
from urllib.parse import urlparse

# -------------------------------------------------------------------
# Paths
# -------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

# -------------------------------------------------------------------
# Core
# -------------------------------------------------------------------
SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'dev-only-unsafe-key')
DEBUG = os.getenv('DJANGO_DEBUG', 'False') == 'True'
ALLOWED_HOSTS = os.getenv('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',')

# -------------------------------------------------------------------
# Apps
# -------------------------------------------------------------------
DJANGO_APPS = [
    'django.contrib.admin', 'django.contrib.auth', 'django.contrib.contenttypes',
    'django.contrib.sessions', 'django.contrib.messages', 'django.contrib.staticfiles',
]
THIRD_PARTY_APPS = [
    'django_filters', 'rest_framework', 'rest_framework_simplejwt',
    'rest_framework_simplejwt.token_blacklist', 'corsheaders', 'drf_yasg',
]
PROJECT_APPS = [
    'apps.common', 'apps.members', 'apps.venue',
    'apps.course', 'apps.shop', 'apps.team',
]
INSTALLED_APPS = DJANGO_APPS + THIRD_PARTY_APPS + PROJECT_APPS

# -------------------------------------------------------------------
# Middleware
# -------------------------------------------------------------------
MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.common.CommonMiddleware',
    'arena_core.middleware.RequestLoggingMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

# -------------------------------------------------------------------
# URLs & WSGI
# -------------------------------------------------------------------
ROOT_URLCONF = 'arena_core.urls'
WSGI_APPLICATION = 'arena_core.wsgi.application'

# -------------------------------------------------------------------
# Templates
# -------------------------------------------------------------------
TEMPLATES = [{
    'BACKEND': 'django.template.backends.django.DjangoTemplates',
    'DIRS': [],
    'APP_DIRS': True,
    'OPTIONS': {'context_processors': [
        'django.template.context_processors.debug',
        'django.template.context_processors.request',
        'django.contrib.auth.context_processors.auth',
        'django.contrib.messages.context_processors.messages',
    ]},
}]

# -------------------------------------------------------------------
# Database (DATABASE_URL > POSTGRES_* > sqlite)
# -------------------------------------------------------------------
def _db_from_env():
    url = os.getenv('DATABASE_URL', '').strip()
    if url:
        u = urlparse(url)
        engine = {
            'postgres': 'django.db.backends.postgresql',
            'postgresql': 'django.db.backends.postgresql',
            'mysql': 'django.db.backends.mysql',
            'sqlite': 'django.db.backends.sqlite3',
        }.get(u.scheme, 'django.db.backends.postgresql')
        name = u.path.lstrip('/') or str(BASE_DIR / '../db.sqlite3')
        return {
            'ENGINE': engine, 'NAME': name,
            'USER': u.username or '', 'PASSWORD': u.password or '',
            'HOST': u.hostname or '', 'PORT': u.port or '',
            'OPTIONS': {'sslmode': 'require'} if engine.endswith('postgresql') and os.getenv('DB_SSLMODE_REQUIRE', 'False') == 'True' else {},
        }

    if os.getenv('POSTGRES_DB'):
        return {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': os.getenv('POSTGRES_DB'),
            'USER': os.getenv('POSTGRES_USER', ''),
            'PASSWORD': os.getenv('POSTGRES_PASSWORD', ''),
            'HOST': os.getenv('POSTGRES_HOST', 'localhost'),
            'PORT': os.getenv('POSTGRES_PORT', '5432'),
        }

    return {'ENGINE': 'django.db.backends.sqlite3', 'NAME': BASE_DIR / '../db.sqlite3'}

DATABASES = {'default': _db_from_env()}

# -------------------------------------------------------------------
# Auth
# -------------------------------------------------------------------
AUTH_USER_MODEL = 'members.Member'
AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator', 'OPTIONS': {'min_length': 6}},
]

# -------------------------------------------------------------------
# I18N / TZ
# -------------------------------------------------------------------
LANGUAGE_CODE = os.getenv('DJANGO_LANG', 'zh-hant')
TIME_ZONE = os.getenv('DJANGO_TZ', 'Asia/Taipei')
USE_I18N = True
USE_TZ = True

# -------------------------------------------------------------------
# Static
# -------------------------------------------------------------------
STATIC_URL = '/static/'
STATIC_ROOT = os.getenv('DJANGO_STATIC_ROOT', str(BASE_DIR / '../staticfiles'))

# -------------------------------------------------------------------
# CORS
# -------------------------------------------------------------------
CORS_ALLOWED_ORIGINS = [o for o in os.getenv('CORS_ALLOWED_ORIGINS', 'http://localhost:3000').split(',') if o]

# -------------------------------------------------------------------
# DRF / JWT
# -------------------------------------------------------------------
REST_FRAMEWORK = {
    'DEFAULT_PERMISSION_CLASSES': ('rest_framework.permissions.IsAuthenticated',),
    'DEFAULT_AUTHENTICATION_CLASSES': ('rest_framework_simplejwt.authentication.JWTAuthentication',),
    'DEFAULT_FILTER_BACKENDS': ['django_filters.rest_framework.DjangoFilterBackend'],
    'DEFAULT_PAGINATION_CLASS': 'apps.common.pagination.ArenaPagination',
    'EXCEPTION_HANDLER': 'apps.common.exceptions.api_exception_handler',
    'PAGE_SIZE': int(os.getenv('DJANGO_PAGE_SIZE', '10')),
}
SIMPLE_JWT = {
    'ACCESS_TOKEN_LIFETIME': timedelta(minutes=int(os.getenv('JWT_ACCESS_MINUTES', '60'))),
    'REFRESH_TOKEN_LIFETIME': timedelta(days=int(os.getenv('JWT_REFRESH_DAYS', '7'))),
    'BLACKLIST_AFTER_ROTATION': True,
    'ROTATE_REFRESH_TOKENS': False,
    'AUTH_HEADER_TYPES': ('Bearer',),
}

# -------------------------------------------------------------------
# Firebase (ID tokens firmados por Google)
# -------------------------------------------------------------------
FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID', '')
FIREBASE_JWKS_URL = os.getenv(
    'FIREBASE_JWKS_URL',
    'https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com',
)

# -------------------------------------------------------------------
# Swagger
# -------------------------------------------------------------------
SWAGGER_SETTINGS = {
    'SECURITY_DEFINITIONS': {
        'Bearer': {'type': 'apiKey', 'name': 'Authorization', 'in': 'header',
                   'description': 'JWT Authorization header using the Bearer scheme.'}
    }
}

# -------------------------------------------------------------------
# Negocio
# -------------------------------------------------------------------
PAGINATION_MAX_PER_PAGE = int(os.getenv('PAGINATION_MAX_PER_PAGE', '100'))
LOOKUP_CACHE_SECONDS = int(os.getenv('LOOKUP_CACHE_SECONDS', '60'))
AVAILABILITY_RANGE_DAYS = int(os.getenv('AVAILABILITY_RANGE_DAYS', '30'))
RESERVATION_DEFAULT_STATUS_ID = int(os.getenv('RESERVATION_DEFAULT_STATUS_ID', '1'))
BOOKING_DEFAULT_STATUS_ID = int(os.getenv('BOOKING_DEFAULT_STATUS_ID', '1'))
SHOP_DEFAULT_ORDER_STATUS_ID = int(os.getenv('SHOP_DEFAULT_ORDER_STATUS_ID', '2'))
# delivery_id -> costo de envío
SHOP_SHIPPING_FEES = {1: 60, 2: 60, 3: 100}

# -------------------------------------------------------------------
# Logging (stdout; filtros para bajar ruido por ENV)
# -------------------------------------------------------------------
class MessageDenylistFilter(logging.Filter):
    """Drops records whose message contains any substring from DJANGO_LOG_SKIP_CONTAINS (csv)."""
    def __init__(self, denylist=None):
        super().__init__()
        self.denylist = [s.strip() for s in (denylist or []) if s and s.strip()]

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        return not any(sub in msg for sub in self.denylist)

LOG_LEVEL = os.getenv("DJANGO_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("DJANGO_LOG_FORMAT", "text")  # text|json
REQUEST_LOG_LEVEL = os.getenv("DJANGO_REQUEST_LOG_LEVEL", "WARNING")
MIDDLEWARE_LOG_LEVEL = os.getenv("DJANGO_MIDDLEWARE_LOG_LEVEL", "INFO")
_skip = [s for s in os.getenv("DJANGO_LOG_SKIP_CONTAINS", "").split(",") if s]

_formatters = {
    "text": {"format": "[{levelname}] {asctime} {name} {message}", "style": "{"},
    "json": {"()": "pythonjsonlogger.jsonlogger.JsonFormatter",
             "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s"},
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {"denylist": {"()": MessageDenylistFilter, "denylist": _skip}},
    "formatters": {"app": _formatters["json"] if LOG_FORMAT == "json" else _formatters["text"]},
    "handlers": {"console": {"class": "logging.StreamHandler", "formatter": "app", "filters": ["denylist"]}},
    "root": {"handlers": ["console"], "level": LOG_LEVEL},
    "loggers": {
        "django.request": {"handlers": ["console"], "level": REQUEST_LOG_LEVEL, "propagate": False},
        "arena_core.middleware": {"handlers": ["console"], "level": MIDDLEWARE_LOG_LEVEL, "propagate": False},
        "gunicorn.error": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "gunicorn.access": {"handlers": ["console"], "level": "WARNING", "propagate": False},
        "apps": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
