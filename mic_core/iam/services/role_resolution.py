# mic_core/iam/services/role_resolution.py
from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from django.conf import settings
from django.db import connection

from mic_core.common.permissions import ALL_ROLES, ROLE_MEDEWERKER, ROLE_SUPER_ADMIN
from mic_core.iam.models import UserProfile

logger = logging.getLogger("mic.iam.roles")

RoleLookup = Callable[[int], Optional[str]]


def lookup_profile_role(user_id: int) -> str | None:
    """Regular ORM read of the caller's profile."""
    return (
        UserProfile.objects.filter(user_id=user_id)
        .values_list("role", flat=True)
        .first()
    )


def lookup_role_privileged(user_id: int) -> str | None:
    """
    Direct table read that skips the ORM manager and model layer.
    Used when the regular profile read fails (broken row, manager error).
    """
    table = connection.ops.quote_name(UserProfile._meta.db_table)
    with connection.cursor() as cursor:
        cursor.execute(f"SELECT role FROM {table} WHERE user_id = %s", [user_id])
        row = cursor.fetchone()
    return row[0] if row else None


def _valid(role) -> str | None:
    if isinstance(role, str) and role in ALL_ROLES:
        return role
    return None


def resolve_role(
    user_id: int,
    *,
    profile_lookup: RoleLookup | None = None,
    privileged_lookup: RoleLookup | None = None,
    operator_ids: Iterable[int] | None = None,
) -> str:
    """
    Resolve a user's role. Never raises, never escalates by accident.

    Chain:
      1) profile lookup
      2) privileged lookup
      3) configured operator ids (settings.MIC_OPERATOR_USER_IDS) -> super_admin
      4) medewerker
    """
    profile_lookup = profile_lookup or lookup_profile_role
    privileged_lookup = privileged_lookup or lookup_role_privileged

    for step, lookup in (("profile", profile_lookup), ("privileged", privileged_lookup)):
        try:
            role = _valid(lookup(user_id))
        except Exception:
            logger.warning("Role lookup step=%s failed for user_id=%s", step, user_id, exc_info=True)
            continue

        if role is not None:
            return role
        logger.debug("Role lookup step=%s found nothing for user_id=%s", step, user_id)

    if operator_ids is None:
        operator_ids = getattr(settings, "MIC_OPERATOR_USER_IDS", []) or []

    if user_id in set(operator_ids):
        logger.warning("Role for user_id=%s resolved from operator list", user_id)
        return ROLE_SUPER_ADMIN

    return ROLE_MEDEWERKER
