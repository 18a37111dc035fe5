# config/settings/test.py
from .base import *  # noqa

SECRET_KEY = "test-secret-key-not-for-production-use-only"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

MIC_OPERATOR_USER_IDS = []

# caplog listens on the root logger
LOGGING["loggers"]["mic"]["propagate"] = True
