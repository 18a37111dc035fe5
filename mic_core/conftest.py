# mic_core/conftest.py
import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from mic_core.clients.models import Client
from mic_core.common.permissions import ROLE_SUPER_ADMIN
from mic_core.iam.models import UserProfile
from mic_core.incidents.models import IncidentLog, IncidentType


@pytest.fixture
def user(db):
    """
    Plain staff member. The post_save signal gives it a medewerker profile.
    """
    User = get_user_model()
    return User.objects.create_user(
        username="medewerker@example.com",
        email="medewerker@example.com",
        password="testpass",
        is_active=True,
    )


@pytest.fixture
def admin_user(db):
    User = get_user_model()
    user = User.objects.create_user(
        username="beheer@example.com",
        email="beheer@example.com",
        password="testpass",
        is_active=True,
    )
    UserProfile.objects.filter(user=user).update(role=ROLE_SUPER_ADMIN)
    return user


@pytest.fixture
def other_user(db):
    User = get_user_model()
    return User.objects.create_user(
        username="collega@example.com",
        email="collega@example.com",
        password="testpass",
    )


@pytest.fixture
def api_client(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


@pytest.fixture
def admin_client(admin_user):
    c = APIClient()
    c.force_authenticate(user=admin_user)
    return c


@pytest.fixture
def client_obj(db):
    return Client.objects.create(full_name="Jan Jansen")


@pytest.fixture
def second_client(db):
    return Client.objects.create(full_name="Piet Pietersen")


@pytest.fixture
def incident_types(db):
    """
    A small taxonomy covering every color rule:
    explicit color, category palette, severity palette, nothing at all.
    """
    return {
        "slaan": IncidentType.objects.create(
            name="Slaan", category="fysiek", severity_level=4, color_code="#123456"
        ),
        "schelden": IncidentType.objects.create(name="Schelden", category="verbaal", severity_level=2),
        "huilen": IncidentType.objects.create(name="Huilen", category="emotioneel", severity_level=1),
        "weglopen": IncidentType.objects.create(name="Weglopen", category=None, severity_level=3),
    }


@pytest.fixture
def make_log(db, user, client_obj):
    """
    Factory: make_log(incident_type, count=1, **fields) -> IncidentLog
    Defaults to the staff user and client_obj.
    """
    def _make(incident_type, count=1, **fields):
        fields.setdefault("user", user)
        fields.setdefault("client", client_obj)
        fields.setdefault("severity", incident_type.severity_level)
        return IncidentLog.objects.create(incident_type=incident_type, count=count, **fields)

    return _make
