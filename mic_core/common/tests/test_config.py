# mic_core/common/tests/test_config.py
from datetime import date

import pytest
from django.core.exceptions import ImproperlyConfigured

from mic_core.common.config import postgres_from_env, require_env
from mic_core.common.dates import shift_months, start_of_month, start_of_year


def test_require_env_missing_raises(monkeypatch):
    monkeypatch.delenv("MIC_TEST_VALUE", raising=False)
    with pytest.raises(ImproperlyConfigured):
        require_env("MIC_TEST_VALUE")


def test_require_env_blank_raises(monkeypatch):
    monkeypatch.setenv("MIC_TEST_VALUE", "   ")
    with pytest.raises(ImproperlyConfigured):
        require_env("MIC_TEST_VALUE")


def test_require_env_returns_value(monkeypatch):
    monkeypatch.setenv("MIC_TEST_VALUE", "x")
    assert require_env("MIC_TEST_VALUE") == "x"


def _db_env(monkeypatch, **overrides):
    values = {
        "DB_NAME": "micdb",
        "DB_USER": "mic",
        "DB_PASSWORD": "s@cret",
        "DB_HOST": "db.local",
    }
    values.update(overrides)
    for key in ("DB_PORT", "DB_SSLMODE"):
        monkeypatch.delenv(key, raising=False)
    for key, value in values.items():
        if value is None:
            monkeypatch.delenv(key, raising=False)
        else:
            monkeypatch.setenv(key, value)


def test_postgres_from_env(monkeypatch):
    _db_env(monkeypatch, DB_PORT="6543")
    assert postgres_from_env() == {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": "micdb",
        "USER": "mic",
        "PASSWORD": "s@cret",
        "HOST": "db.local",
        "PORT": "6543",
    }


def test_postgres_from_env_default_port_and_sslmode(monkeypatch):
    _db_env(monkeypatch, DB_SSLMODE="require")
    cfg = postgres_from_env()
    assert cfg["PORT"] == "5432"
    assert cfg["OPTIONS"] == {"sslmode": "require"}


@pytest.mark.parametrize("missing", ["DB_NAME", "DB_USER", "DB_PASSWORD", "DB_HOST"])
def test_postgres_from_env_refuses_missing_values(monkeypatch, missing):
    _db_env(monkeypatch, **{missing: None})
    with pytest.raises(ImproperlyConfigured, match=missing):
        postgres_from_env()


def test_shift_months_clamps_day():
    assert shift_months(date(2024, 3, 31), -1) == date(2024, 2, 29)
    assert shift_months(date(2024, 1, 15), -1) == date(2023, 12, 15)
    assert shift_months(date(2024, 11, 30), 3) == date(2025, 2, 28)


def test_start_helpers():
    assert start_of_month(date(2024, 5, 17)) == date(2024, 5, 1)
    assert start_of_year(date(2024, 5, 17)) == date(2024, 1, 1)
