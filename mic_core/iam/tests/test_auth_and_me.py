# mic_core/iam/tests/test_auth_and_me.py
import pytest
from django.contrib.auth.tokens import default_token_generator
from django.utils.encoding import force_bytes
from django.utils.http import urlsafe_base64_encode
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken

from mic_core.common import events
from mic_core.common.permissions import ROLE_MEDEWERKER
from mic_core.iam.services.session import SESSION_CHANGED, SESSION_CLAIM, AuthService

pytestmark = pytest.mark.django_db


def test_me_requires_auth():
    """
    Fresh APIClient: the api_client fixture is already authenticated.
    """
    res = APIClient().get("/api/v1/me/")
    assert res.status_code in (401, 403)


def test_login_sets_cookies_and_announces_session(user, settings):
    seen = []
    handler = events.subscribe(SESSION_CHANGED)(seen.append)
    try:
        res = APIClient().post(
            "/api/v1/auth/login/",
            {"username": "medewerker@example.com", "password": "testpass"},
            format="json",
        )
    finally:
        events.unsubscribe(SESSION_CHANGED, handler)

    assert res.status_code == 200
    assert settings.SIMPLE_JWT["AUTH_COOKIE"] in res.cookies
    assert settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"] in res.cookies
    assert len(seen) == 1
    assert seen[0]["user_id"] == user.id

    access = AccessToken(res.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]].value)
    assert seen[0]["session_key"] == access[SESSION_CLAIM]


def test_login_wrong_password_is_401(user):
    res = APIClient().post(
        "/api/v1/auth/login/",
        {"username": "medewerker@example.com", "password": "fout"},
        format="json",
    )
    assert res.status_code == 401
    assert "error" in res.json()


def test_access_cookie_authenticates(user, settings):
    c = APIClient()
    c.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]] = str(RefreshToken.for_user(user).access_token)

    res = c.get("/api/v1/me/")
    assert res.status_code == 200
    assert res.json()["id"] == user.id


def test_bearer_header_authenticates(user):
    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(user).access_token}")

    res = c.get("/api/v1/me/")
    assert res.status_code == 200


def test_refresh_uses_refresh_cookie(user, settings):
    c = APIClient()
    c.cookies[settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"]] = str(RefreshToken.for_user(user))

    res = c.post("/api/v1/auth/refresh/")
    assert res.status_code == 200
    assert settings.SIMPLE_JWT["AUTH_COOKIE"] in res.cookies


def test_logout_clears_cookies(api_client, settings):
    res = api_client.post("/api/v1/auth/logout/")
    assert res.status_code == 200
    assert res.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]].value == ""


def _login(username, settings):
    c = APIClient()
    res = c.post("/api/v1/auth/login/", {"username": username, "password": "testpass"}, format="json")
    assert res.status_code == 200
    sid = AccessToken(res.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]].value)[SESSION_CLAIM]
    return c, sid


def test_login_by_another_user_leaves_live_session_untouched(user, admin_user, settings):
    own_client, sid = _login("medewerker@example.com", settings)

    service = AuthService(session_loader=lambda: user.id, session_key=sid)
    sub = service.initialize()
    try:
        assert service.role == ROLE_MEDEWERKER

        admin_client, _ = _login("beheer@example.com", settings)
        assert service.snapshot.user_id == user.id
        assert service.role == ROLE_MEDEWERKER

        admin_client.post("/api/v1/auth/logout/")
        assert service.snapshot.is_authenticated

        own_client.post("/api/v1/auth/logout/")
        assert not service.snapshot.is_authenticated
    finally:
        sub.dispose()


def test_each_login_gets_its_own_session_key(user, settings):
    _, first = _login("medewerker@example.com", settings)
    _, second = _login("medewerker@example.com", settings)
    assert first and second
    assert first != second


def test_refresh_keeps_session_key(user, settings):
    c, sid = _login("medewerker@example.com", settings)

    res = c.post("/api/v1/auth/refresh/")
    assert res.status_code == 200
    assert AccessToken(res.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]].value)[SESSION_CLAIM] == sid


def test_me_returns_profile_and_role(api_client, user):
    res = api_client.get("/api/v1/me/")
    assert res.status_code == 200

    body = res.json()
    assert body["id"] == user.id
    assert body["email"] == "medewerker@example.com"
    assert body["role"] == "medewerker"


def test_me_patch_updates_full_name(api_client):
    res = api_client.patch("/api/v1/me/", {"full_name": "  Mia Medewerker "}, format="json")
    assert res.status_code == 200
    assert res.json()["full_name"] == "Mia Medewerker"


def test_password_reset_request_always_200(user):
    c = APIClient()
    assert c.post("/api/v1/auth/password-reset/", {"email": "medewerker@example.com"}, format="json").status_code == 200
    assert c.post("/api/v1/auth/password-reset/", {"email": "niemand@example.com"}, format="json").status_code == 200


def test_password_reset_confirm_sets_new_password(user):
    payload = {
        "uid": urlsafe_base64_encode(force_bytes(user.pk)),
        "token": default_token_generator.make_token(user),
        "new_password": "Heel-Nieuw-Wachtwoord-7",
    }
    res = APIClient().post("/api/v1/auth/password-reset/confirm/", payload, format="json")
    assert res.status_code == 200

    user.refresh_from_db()
    assert user.check_password("Heel-Nieuw-Wachtwoord-7")


def test_password_reset_confirm_rejects_bad_token(user):
    payload = {
        "uid": urlsafe_base64_encode(force_bytes(user.pk)),
        "token": "nope",
        "new_password": "Heel-Nieuw-Wachtwoord-7",
    }
    res = APIClient().post("/api/v1/auth/password-reset/confirm/", payload, format="json")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "validation_error"
