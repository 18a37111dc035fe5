# mic_core/iam/services/accounts.py
from __future__ import annotations

import logging
from urllib.parse import urlparse

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.forms import PasswordResetForm
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from mic_core.common.permissions import ALL_ROLES, ROLE_MEDEWERKER
from mic_core.iam.models import UserProfile

logger = logging.getLogger("mic.iam.accounts")


def _normalize_email(email: str | None) -> str:
    value = (email or "").strip().lower()
    if not value:
        raise ValueError("Email is verplicht.")
    return value


def _check_password(password: str | None, *, user=None) -> str:
    if not password:
        raise ValueError("Wachtwoord is verplicht.")
    try:
        validate_password(password, user=user)
    except DjangoValidationError as e:
        raise ValueError(" ".join(e.messages))
    return password


class AccountService:
    @staticmethod
    @transaction.atomic
    def create_user(
        *,
        email: str,
        password: str,
        role: str = ROLE_MEDEWERKER,
        full_name: str | None = None,
        actor_user_id: int | None = None,
    ):
        """
        Creates auth user + profile in one transaction.
        The auth username is the e-mail address.
        """
        email = _normalize_email(email)
        if role not in ALL_ROLES:
            raise ValueError(f"Ongeldige rol: {role}")

        User = get_user_model()
        if User.objects.filter(username__iexact=email).exists():
            raise ValueError("Er bestaat al een gebruiker met dit e-mailadres.")

        _check_password(password)

        user = User.objects.create_user(username=email, email=email, password=password)

        # post_save already created a medewerker profile; align it with the request.
        profile, _ = UserProfile.objects.get_or_create(user=user)
        profile.email = email
        profile.role = role
        profile.full_name = (full_name or "").strip() or None
        profile.save(update_fields=["email", "role", "full_name", "updated_at"])

        logger.info("User created user_id=%s role=%s by actor_user_id=%s", user.pk, role, actor_user_id)
        return user

    @staticmethod
    @transaction.atomic
    def reset_password(*, email: str, new_password: str, actor_user_id: int | None = None):
        """Direct overwrite by an administrator; no e-mail round trip."""
        email = _normalize_email(email)

        User = get_user_model()
        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            raise ValueError("Gebruiker niet gevonden.")

        _check_password(new_password, user=user)
        user.set_password(new_password)
        user.save(update_fields=["password"])

        logger.info("Password reset for user_id=%s by actor_user_id=%s", user.pk, actor_user_id)
        return user

    @staticmethod
    @transaction.atomic
    def set_role(*, user_id: int, role: str, actor_user_id: int | None = None) -> UserProfile:
        if role not in ALL_ROLES:
            raise ValueError(f"Ongeldige rol: {role}")

        profile = UserProfile.objects.select_for_update().get(user_id=user_id)
        if profile.role != role:
            profile.role = role
            profile.save(update_fields=["role", "updated_at"])
            logger.info("Role of user_id=%s set to %s by actor_user_id=%s", user_id, role, actor_user_id)
        return profile

    @staticmethod
    @transaction.atomic
    def update_profile(*, user_id: int, full_name: str | None) -> UserProfile:
        User = get_user_model()
        user = User.objects.get(pk=user_id)
        profile, _ = UserProfile.objects.get_or_create(
            user=user,
            defaults={"email": user.email or None},
        )
        profile.full_name = (full_name or "").strip() or None
        profile.save(update_fields=["full_name", "updated_at"])
        return profile

    @staticmethod
    def send_password_reset(*, email: str, request=None) -> None:
        """
        Mails a reset link pointing at the frontend. Silent for unknown
        addresses so the endpoint cannot be used to probe accounts.
        """
        form = PasswordResetForm(data={"email": (email or "").strip()})
        if not form.is_valid():
            raise ValueError("Ongeldig e-mailadres.")

        frontend_url = settings.MIC_FRONTEND_URL.rstrip("/")
        form.save(
            request=request,
            # the link points at the frontend, not at this API host
            domain_override=urlparse(frontend_url).netloc or None,
            use_https=frontend_url.startswith("https://"),
            subject_template_name="registration/mic_password_reset_subject.txt",
            email_template_name="registration/mic_password_reset_email.txt",
            extra_email_context={"frontend_url": frontend_url},
        )
        logger.info("Password reset mail requested")
