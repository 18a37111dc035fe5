# mic_core/iam/models.py
from django.conf import settings
from django.db import models

from mic_core.common.permissions import ROLE_CHOICES, ROLE_MEDEWERKER


class UserProfile(models.Model):
    """
    Application profile anchored to Django's AUTH_USER_MODEL.
    The primary key IS the auth user id, so profile.pk == user.id.
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="mic_profile",
    )

    email = models.EmailField(null=True, blank=True)
    full_name = models.CharField(max_length=255, null=True, blank=True)
    role = models.CharField(max_length=32, choices=ROLE_CHOICES, default=ROLE_MEDEWERKER, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True, null=True)

    class Meta:
        db_table = "iam_user_profile"
        ordering = ["email"]

    def __str__(self) -> str:
        return f"{self.email or self.user_id} ({self.role})"
