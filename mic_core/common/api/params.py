# mic_core/common/api/params.py
from __future__ import annotations

from datetime import date

from django.utils.dateparse import parse_date
from rest_framework.exceptions import ValidationError


def truthy(value) -> bool:
    return str(value or "").strip().lower() in {"1", "true", "yes", "ja"}


def date_param(request, name: str, *, default: date | None = None) -> date | None:
    """
    Read ?name=YYYY-MM-DD. Absent -> default, malformed -> 400.
    """
    raw = (request.query_params.get(name) or "").strip()
    if not raw:
        return default

    try:
        value = parse_date(raw)
    except ValueError:
        value = None
    if value is None:
        raise ValidationError({name: "Gebruik het formaat YYYY-MM-DD."})
    return value


def date_range_params(request, *, default_start: date | None = None, default_end: date | None = None):
    start = date_param(request, "start", default=default_start)
    end = date_param(request, "end", default=default_end)
    if start and end and start > end:
        raise ValidationError({"detail": "Startdatum ligt na de einddatum."})
    return start, end
