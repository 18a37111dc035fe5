# mic_core/iam/signals.py
from __future__ import annotations

import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from mic_core.common.permissions import ROLE_MEDEWERKER
from mic_core.iam.models import UserProfile

logger = logging.getLogger("mic.iam.signals")


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def ensure_profile_for_new_user(sender, instance, created, **kwargs):
    """
    Every auth user gets a medewerker profile the moment it is created.
    Promotion to super_admin is always an explicit action.
    """
    if not created or kwargs.get("raw"):
        return

    _, was_created = UserProfile.objects.get_or_create(
        user=instance,
        defaults={"email": instance.email or None, "role": ROLE_MEDEWERKER},
    )
    if was_created:
        logger.info("Created profile for user_id=%s", instance.pk)
