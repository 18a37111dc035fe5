# mic_core/clients/tests/test_clients_api.py
import pytest

from mic_core.clients.models import Client

pytestmark = pytest.mark.django_db

URL = "/api/v1/clients/"


def test_staff_sees_active_clients_only(api_client, client_obj):
    Client.objects.create(full_name="Oud Dossier", is_active=False)

    res = api_client.get(URL, {"include_inactive": "1"})
    assert res.status_code == 200
    assert [c["full_name"] for c in res.json()] == ["Jan Jansen"]


def test_admin_may_include_inactive(admin_client, client_obj):
    Client.objects.create(full_name="Oud Dossier", is_active=False)

    names = [c["full_name"] for c in admin_client.get(URL, {"include_inactive": "1"}).json()]
    assert names == ["Jan Jansen", "Oud Dossier"]


def test_list_search_and_order(api_client, client_obj, second_client):
    assert [c["full_name"] for c in api_client.get(URL).json()] == ["Jan Jansen", "Piet Pietersen"]
    assert [c["full_name"] for c in api_client.get(URL, {"q": "piet"}).json()] == ["Piet Pietersen"]


def test_staff_cannot_create(api_client):
    res = api_client.post(URL, {"full_name": "Nieuw"}, format="json")
    assert res.status_code == 403


def test_admin_create_and_deactivate(admin_client):
    res = admin_client.post(URL, {"full_name": "  Nieuwe Cliënt "}, format="json")
    assert res.status_code == 201
    client_id = res.json()["id"]
    assert res.json()["full_name"] == "Nieuwe Cliënt"

    res = admin_client.patch(f"{URL}{client_id}/", {"is_active": False}, format="json")
    assert res.status_code == 200
    assert Client.objects.get(id=client_id).is_active is False


def test_blank_name_rejected(admin_client, client_obj):
    res = admin_client.patch(f"{URL}{client_obj.id}/", {"full_name": "   "}, format="json")
    assert res.status_code == 400


def test_inactive_client_hidden_from_staff_retrieve(api_client, admin_client):
    gone = Client.objects.create(full_name="Oud Dossier", is_active=False)

    assert api_client.get(f"{URL}{gone.id}/").status_code == 404
    assert admin_client.get(f"{URL}{gone.id}/").status_code == 200


def test_delete_is_not_available(admin_client, client_obj):
    res = admin_client.delete(f"{URL}{client_obj.id}/")
    assert res.status_code in (403, 405)
