# mic_core/common/config.py
from __future__ import annotations

import os

from django.core.exceptions import ImproperlyConfigured


def require_env(name: str) -> str:
    """
    Read a mandatory environment variable.
    Raises ImproperlyConfigured when it is missing or blank so the process
    refuses to start instead of failing on the first request.
    """
    value = (os.getenv(name) or "").strip()
    if not value:
        raise ImproperlyConfigured(f"Missing required environment variable: {name}")
    return value


def postgres_from_env() -> dict:
    """
    Django DATABASES entry from the DB_* variables, none of them defaulted
    except the port. DB_SSLMODE is passed through to libpq when set.
    """
    cfg = {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": require_env("DB_NAME"),
        "USER": require_env("DB_USER"),
        "PASSWORD": require_env("DB_PASSWORD"),
        "HOST": require_env("DB_HOST"),
        "PORT": os.getenv("DB_PORT", "5432"),
    }

    sslmode = (os.getenv("DB_SSLMODE") or "").strip()
    if sslmode:
        cfg["OPTIONS"] = {"sslmode": sslmode}
    return cfg
