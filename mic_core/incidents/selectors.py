# mic_core/incidents/selectors.py
from __future__ import annotations

from datetime import date
from typing import List

from django.db.models import QuerySet

from mic_core.incidents.models import IncidentLog, IncidentType
from mic_core.incidents.types import IncidentLogRow, IncidentTypeInfo


def incident_logs_qs() -> QuerySet[IncidentLog]:
    return IncidentLog.objects.select_related("client", "incident_type")


def user_logs(
    *,
    user_id: int,
    on: date | None = None,
    start: date | None = None,
    end: date | None = None,
) -> QuerySet[IncidentLog]:
    """
    The caller's own logs, newest first.
    `on` wins over start/end when both are given.
    """
    qs = incident_logs_qs().filter(user_id=user_id)
    if on is not None:
        qs = qs.filter(log_date=on)
    else:
        if start is not None:
            qs = qs.filter(log_date__gte=start)
        if end is not None:
            qs = qs.filter(log_date__lte=end)
    return qs.order_by("-created_at", "-id")


def logs_in_range(
    *,
    start: date | None = None,
    end: date | None = None,
    user_id: int | None = None,
) -> QuerySet[IncidentLog]:
    qs = incident_logs_qs()
    if user_id is not None:
        qs = qs.filter(user_id=user_id)
    if start is not None:
        qs = qs.filter(log_date__gte=start)
    if end is not None:
        qs = qs.filter(log_date__lte=end)
    return qs.order_by("-log_date", "-created_at", "-id")


def incident_types(*, include_inactive: bool = False) -> QuerySet[IncidentType]:
    qs = IncidentType.objects.all()
    if not include_inactive:
        qs = qs.filter(is_active=True)
    return qs.order_by("category", "name")


def active_type_infos() -> List[IncidentTypeInfo]:
    return [IncidentTypeInfo.from_model(t) for t in incident_types()]


def to_rows(qs) -> List[IncidentLogRow]:
    return [IncidentLogRow.from_model(log) for log in qs]
