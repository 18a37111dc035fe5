# mic_core/exports/backup.py
from __future__ import annotations

import json
import logging

from django.core.serializers.json import DjangoJSONEncoder
from django.utils import timezone

from mic_core.clients.models import Client
from mic_core.iam.models import UserProfile
from mic_core.incidents.models import IncidentLog, IncidentType
from mic_core.statistics.selectors import daily_totals

logger = logging.getLogger("mic.exports")

BACKUP_VERSION = "1"


def build_backup() -> dict:
    """Full data dump, one list per table, plus a metadata block."""
    tables = {
        "clients": list(Client.objects.order_by("full_name").values()),
        "incident_types": list(IncidentType.objects.order_by("category", "name").values()),
        "incident_logs": list(IncidentLog.objects.order_by("-created_at", "-id").values()),
        "profiles": list(
            UserProfile.objects.order_by("email").values("user_id", "email", "full_name", "role", "created_at", "updated_at")
        ),
        "daily_totals": daily_totals(),
    }

    payload = {
        "metadata": {
            "exportDate": timezone.now(),
            "version": BACKUP_VERSION,
            "counts": {name: len(rows) for name, rows in tables.items()},
        },
        **tables,
    }
    logger.info("Backup built counts=%s", payload["metadata"]["counts"])
    return payload


def render_backup(payload: dict) -> bytes:
    return json.dumps(payload, cls=DjangoJSONEncoder, ensure_ascii=False, indent=2).encode("utf-8")
