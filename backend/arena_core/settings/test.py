# arena_core/settings/test.py
from .base import *


class DisableMigrations:
    """Deshabilita todas las migraciones (tablas via syncdb)."""
    def __contains__(self, item):
        return True

    def __getitem__(self, item):
        return None


MIGRATION_MODULES = DisableMigrations()

DATABASES = {'default': {'ENGINE': 'django.db.backends.sqlite3', 'NAME': ':memory:'}}
PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
CACHES = {'default': {'BACKEND': 'django.core.cache.backends.locmem.LocMemCache'}}
LOOKUP_CACHE_SECONDS = 0
FIREBASE_PROJECT_ID = 'arena-test'
