# mic_core/statistics/selectors.py
"""
Read-only aggregate rows computed with ORM aggregation.

daily_totals:    one row per (log_date, user, client, incident type)
monthly_summary: one row per (month, user, incident type)
"""
from __future__ import annotations

from datetime import date
from typing import List

from django.db.models import Count, F, Sum
from django.db.models.functions import TruncMonth

from mic_core.incidents.models import IncidentLog


def _filtered(*, start: date | None, end: date | None, user_id: int | None):
    qs = IncidentLog.objects.all()
    if user_id is not None:
        qs = qs.filter(user_id=user_id)
    if start is not None:
        qs = qs.filter(log_date__gte=start)
    if end is not None:
        qs = qs.filter(log_date__lte=end)
    return qs


def daily_totals(
    *,
    start: date | None = None,
    end: date | None = None,
    user_id: int | None = None,
) -> List[dict]:
    rows = (
        _filtered(start=start, end=end, user_id=user_id)
        .values("log_date", "user_id", "client_id", "incident_type_id", category=F("incident_type__category"))
        .annotate(total_count=Sum("count"))
        .order_by("log_date", "user_id", "client_id", "incident_type_id")
    )
    return list(rows)


def monthly_summary(
    *,
    start: date | None = None,
    end: date | None = None,
    user_id: int | None = None,
) -> List[dict]:
    rows = (
        _filtered(start=start, end=end, user_id=user_id)
        .annotate(month=TruncMonth("log_date"))
        .values("month", "user_id", "incident_type_id", category=F("incident_type__category"))
        .annotate(
            unique_clients=Count("client_id", distinct=True),
            total_incidents=Sum("count"),
        )
        .order_by("month", "user_id", "incident_type_id")
    )
    return list(rows)


def totals_from_daily(rows: List[dict]) -> dict:
    """Headline numbers for the admin statistics page."""
    return {
        "total": sum(int(r["total_count"] or 0) for r in rows),
        "clients": len({r["client_id"] for r in rows if r["client_id"]}),
        "types": len({r["incident_type_id"] for r in rows if r["incident_type_id"]}),
    }
