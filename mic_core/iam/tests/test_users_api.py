# mic_core/iam/tests/test_users_api.py
import pytest
from django.contrib.auth import get_user_model

from mic_core.iam.models import UserProfile

pytestmark = pytest.mark.django_db


def test_create_user_requires_super_admin(api_client):
    res = api_client.post(
        "/api/v1/users/create/",
        {"email": "x@example.com", "password": "Sterk-Wachtwoord-2024"},
        format="json",
    )
    assert res.status_code == 403


def test_create_user_success(admin_client):
    res = admin_client.post(
        "/api/v1/users/create/",
        {"email": "nieuw@example.com", "password": "Sterk-Wachtwoord-2024", "role": "super_admin"},
        format="json",
    )
    assert res.status_code == 200

    body = res.json()
    assert body["success"] is True
    assert UserProfile.objects.get(pk=body["user_id"]).role == "super_admin"


def test_create_user_failure_is_success_false(admin_client, user):
    res = admin_client.post(
        "/api/v1/users/create/",
        {"email": "medewerker@example.com", "password": "Sterk-Wachtwoord-2024"},
        format="json",
    )
    assert res.status_code == 400
    assert res.json() == {"success": False, "message": "Er bestaat al een gebruiker met dit e-mailadres."}


def test_create_user_invalid_payload_is_success_false(admin_client):
    res = admin_client.post("/api/v1/users/create/", {"email": "a@example.com"}, format="json")
    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["message"].startswith("password:")


def test_reset_password(admin_client, user):
    res = admin_client.post(
        "/api/v1/users/reset-password/",
        {"email": "medewerker@example.com", "new_password": "Nieuw-Wachtwoord-99"},
        format="json",
    )
    assert res.status_code == 200
    assert res.json()["success"] is True

    user.refresh_from_db()
    assert user.check_password("Nieuw-Wachtwoord-99")


def test_reset_password_unknown_user(admin_client):
    res = admin_client.post(
        "/api/v1/users/reset-password/",
        {"email": "niemand@example.com", "new_password": "Nieuw-Wachtwoord-99"},
        format="json",
    )
    assert res.status_code == 400
    assert res.json() == {"success": False, "message": "Gebruiker niet gevonden."}


def test_user_list_is_paginated_and_searchable(admin_client, user, other_user):
    res = admin_client.get("/api/v1/users/", {"q": "collega"})
    assert res.status_code == 200

    body = res.json()
    assert body["count"] == 1
    assert body["results"][0]["email"] == "collega@example.com"


def test_set_role_promotes(admin_client, user):
    res = admin_client.patch(f"/api/v1/users/{user.id}/role/", {"role": "super_admin"}, format="json")
    assert res.status_code == 200
    assert UserProfile.objects.get(pk=user.id).role == "super_admin"


def test_admin_cannot_demote_self(admin_client, admin_user):
    res = admin_client.patch(f"/api/v1/users/{admin_user.id}/role/", {"role": "medewerker"}, format="json")
    assert res.status_code == 400
    assert UserProfile.objects.get(pk=admin_user.id).role == "super_admin"


def test_set_role_unknown_user_is_404(admin_client):
    res = admin_client.patch("/api/v1/users/424242/role/", {"role": "medewerker"}, format="json")
    assert res.status_code == 404


def test_promotion_takes_effect_on_next_request(api_client, user):
    assert api_client.get("/api/v1/statistics/").status_code == 403

    UserProfile.objects.filter(user=user).update(role="super_admin")
    assert api_client.get("/api/v1/statistics/").status_code == 200


def test_created_user_can_log_in(admin_client):
    admin_client.post(
        "/api/v1/users/create/",
        {"email": "login@example.com", "password": "Sterk-Wachtwoord-2024"},
        format="json",
    )
    assert get_user_model().objects.get(username="login@example.com").check_password("Sterk-Wachtwoord-2024")
