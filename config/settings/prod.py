# config/settings/prod.py
from .base import *  # noqa

from mic_core.common.config import postgres_from_env, require_env

# Both are mandatory: refuse to boot with a default key or a guessed database.
SECRET_KEY = require_env("DJANGO_SECRET_KEY")
DATABASES = {"default": postgres_from_env()}

DEBUG = False

CORS_ALLOW_ALL_ORIGINS = False
CORS_ALLOWED_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ALLOWED_ORIGINS", "").split(",") if o.strip()
]
CORS_ALLOW_CREDENTIALS = True

SIMPLE_JWT["AUTH_COOKIE_SECURE"] = True
SIMPLE_JWT["AUTH_COOKIE_SAMESITE"] = "Lax"
