# arena_core/settings/dev.py
from .base import *
import os

# DEBUG viene de base vía DJANGO_DEBUG
CORS_ALLOW_ALL_ORIGINS = os.getenv("CORS_ALLOW_ALL_ORIGINS", "true").lower() == "true"
DEBUG_LOG_REQUESTS = os.getenv("DEBUG_LOG_REQUESTS", "false").lower() == "true"
