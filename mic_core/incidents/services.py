# mic_core/incidents/services.py
from __future__ import annotations

import logging
import re
from datetime import date, time
from typing import Iterable, List
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from mic_core.clients.models import Client
from mic_core.clients.selectors import get_active_client
from mic_core.incidents.models import Category, IncidentLog, IncidentType

logger = logging.getLogger("mic.incidents.services")

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def _require_positive(count) -> int:
    try:
        value = int(count)
    except (TypeError, ValueError):
        raise ValueError("Aantal moet een geheel getal zijn.")
    if value < 1:
        raise ValueError("Aantal moet minimaal 1 zijn.")
    return value


def _unique_ids(ids: Iterable[int]) -> List[int]:
    seen: List[int] = []
    for raw in ids or []:
        value = int(raw)
        if value not in seen:
            seen.append(value)
    if not seen:
        raise ValueError("Geen registraties opgegeven.")
    return seen


def _owned_for_update(*, user_id: int, ids: List[int]) -> List[IncidentLog]:
    """
    Lock every requested row. Any id that is missing or belongs to someone
    else aborts the whole operation before anything is written.
    """
    rows = list(IncidentLog.objects.select_for_update().filter(id__in=ids, user_id=user_id))
    if len(rows) != len(ids):
        found = {r.id for r in rows}
        missing = [i for i in ids if i not in found]
        raise ValueError(f"Registraties niet gevonden: {', '.join(str(i) for i in missing)}")
    return rows


class IncidentLogService:
    @staticmethod
    @transaction.atomic
    def log_incident(
        *,
        user_id: int,
        client_id: UUID,
        incident_type_id: int,
        count: int = 1,
        log_date: date | None = None,
        location: str | None = None,
        time_of_day: time | None = None,
        notes: str | None = None,
        triggered_by: str | None = None,
        intervention_successful: bool = True,
    ) -> IncidentLog:
        try:
            client = get_active_client(client_id)
        except Client.DoesNotExist:
            raise ValueError("Cliënt niet gevonden.")

        itype = IncidentType.objects.filter(id=incident_type_id).first()
        if itype is None:
            raise ValueError("Incidenttype niet gevonden.")
        if not itype.is_active:
            raise ValueError("Dit incidenttype is niet meer actief.")

        log = IncidentLog.objects.create(
            user_id=user_id,
            client=client,
            incident_type=itype,
            count=_require_positive(count),
            log_date=log_date or timezone.localdate(),
            location=(location or "").strip() or None,
            time_of_day=time_of_day,
            notes=notes or None,
            triggered_by=(triggered_by or "").strip() or None,
            intervention_successful=intervention_successful,
            # severity is a snapshot of the type at registration time
            severity=itype.severity_level,
        )

        logger.info(
            "Incident logged id=%s type=%s client=%s count=%s user_id=%s",
            log.id,
            itype.id,
            client.id,
            log.count,
            user_id,
        )
        return log

    @staticmethod
    @transaction.atomic
    def update_count(*, user_id: int, log_id: int, count: int) -> IncidentLog:
        new_count = _require_positive(count)

        log = IncidentLog.objects.select_for_update().get(id=log_id, user_id=user_id)
        log.count = new_count
        log.save(update_fields=["count"])
        return log

    @staticmethod
    @transaction.atomic
    def delete_log(*, user_id: int, log_id: int) -> None:
        log = IncidentLog.objects.get(id=log_id, user_id=user_id)
        log.delete()
        logger.info("Incident log deleted id=%s user_id=%s", log_id, user_id)

    @staticmethod
    @transaction.atomic
    def update_group_count(*, user_id: int, ids: Iterable[int], count: int) -> IncidentLog:
        """
        Grouped edit: the first id carries the new total, the other members
        are removed. All or nothing.
        """
        new_count = _require_positive(count)
        id_list = _unique_ids(ids)
        rows = {r.id: r for r in _owned_for_update(user_id=user_id, ids=id_list)}

        keeper = rows[id_list[0]]
        keeper.count = new_count
        keeper.save(update_fields=["count"])

        rest = id_list[1:]
        if rest:
            IncidentLog.objects.filter(id__in=rest, user_id=user_id).delete()

        logger.info(
            "Grouped count update keeper=%s removed=%s count=%s user_id=%s",
            keeper.id,
            rest,
            new_count,
            user_id,
        )
        return keeper

    @staticmethod
    @transaction.atomic
    def delete_group(*, user_id: int, ids: Iterable[int]) -> int:
        id_list = _unique_ids(ids)
        _owned_for_update(user_id=user_id, ids=id_list)

        deleted, _ = IncidentLog.objects.filter(id__in=id_list, user_id=user_id).delete()
        logger.info("Grouped delete ids=%s user_id=%s", id_list, user_id)
        return deleted


def _clean_type_fields(data: dict) -> dict:
    allowed = {
        "name",
        "description",
        "category",
        "severity_level",
        "requires_notification",
        "color_code",
        "is_active",
    }
    updates = {k: v for k, v in (data or {}).items() if k in allowed}

    if "name" in updates:
        updates["name"] = (updates["name"] or "").strip()
        if not updates["name"]:
            raise ValueError("Naam is verplicht.")

    if "category" in updates:
        category = (updates["category"] or "").strip().lower() or None
        if category is not None and category not in Category.values:
            raise ValueError(f"Onbekende categorie: {category}")
        updates["category"] = category

    if updates.get("severity_level") is not None:
        level = int(updates["severity_level"])
        if not 1 <= level <= 5:
            raise ValueError("Ernst moet tussen 1 en 5 liggen.")
        updates["severity_level"] = level

    if "color_code" in updates:
        color = (updates["color_code"] or "").strip() or None
        if color is not None and not _HEX_COLOR.match(color):
            raise ValueError("Kleurcode moet een hex-waarde zijn, bijvoorbeeld #ef4444.")
        updates["color_code"] = color

    return updates


class IncidentTypeService:
    @staticmethod
    @transaction.atomic
    def create_type(*, data: dict, actor_user_id: int | None = None) -> IncidentType:
        fields = _clean_type_fields(data)
        if not fields.get("name"):
            raise ValueError("Naam is verplicht.")

        itype = IncidentType.objects.create(**fields)
        logger.info("Incident type created id=%s by actor_user_id=%s", itype.id, actor_user_id)
        return itype

    @staticmethod
    @transaction.atomic
    def update_type(*, type_id: int, data: dict, actor_user_id: int | None = None) -> IncidentType:
        itype = IncidentType.objects.select_for_update().get(id=type_id)

        updates = _clean_type_fields(data)
        for k, v in updates.items():
            setattr(itype, k, v)
        itype.save()

        logger.info(
            "Incident type updated id=%s fields=%s by actor_user_id=%s",
            itype.id,
            sorted(updates.keys()),
            actor_user_id,
        )
        return itype
