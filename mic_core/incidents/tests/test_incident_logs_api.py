# mic_core/incidents/tests/test_incident_logs_api.py
from datetime import time, timedelta

import pytest
from django.utils import timezone

from mic_core.incidents.models import IncidentLog

pytestmark = pytest.mark.django_db

URL = "/api/v1/incident-logs/"


def test_create_log(api_client, user, client_obj, incident_types):
    res = api_client.post(
        URL,
        {
            "client_id": str(client_obj.id),
            "incident_type_id": incident_types["slaan"].id,
            "count": 2,
            "location": "Keuken",
            "time_of_day": "14:30",
            "triggered_by": "Geluid",
        },
        format="json",
    )
    assert res.status_code == 201, res.data

    body = res.json()
    assert body["count"] == 2
    assert body["client_name"] == "Jan Jansen"
    assert body["incident_type"]["name"] == "Slaan"
    assert body["incident_type"]["color"] == "#123456"
    assert body["time_of_day"] == "14:30"
    assert body["severity"] == 4
    assert body["user_id"] == user.id
    assert body["combined_log_ids"] is None


def test_create_log_unknown_client_is_400(api_client, incident_types):
    res = api_client.post(
        URL,
        {"client_id": "00000000-0000-0000-0000-000000000000", "incident_type_id": incident_types["slaan"].id},
        format="json",
    )
    assert res.status_code == 400


def test_create_log_count_zero_is_400(api_client, client_obj, incident_types):
    res = api_client.post(
        URL,
        {"client_id": str(client_obj.id), "incident_type_id": incident_types["slaan"].id, "count": 0},
        format="json",
    )
    assert res.status_code == 400


def test_list_defaults_to_today_and_own_logs(api_client, make_log, other_user, incident_types):
    mine = make_log(incident_types["slaan"])
    make_log(incident_types["slaan"], user=other_user)
    make_log(incident_types["slaan"], log_date=timezone.localdate() - timedelta(days=1))

    res = api_client.get(URL)
    assert res.status_code == 200
    assert [r["id"] for r in res.json()] == [mine.id]


def test_list_newest_first(api_client, make_log, incident_types):
    first = make_log(incident_types["slaan"])
    second = make_log(incident_types["schelden"])

    assert [r["id"] for r in api_client.get(URL).json()] == [second.id, first.id]


def test_list_date_range(api_client, make_log, incident_types):
    today = timezone.localdate()
    old = make_log(incident_types["slaan"], log_date=today - timedelta(days=10))
    make_log(incident_types["slaan"], log_date=today - timedelta(days=40))

    res = api_client.get(URL, {"start": (today - timedelta(days=30)).isoformat(), "end": today.isoformat()})
    assert [r["id"] for r in res.json()] == [old.id]


def test_list_bad_date_is_400(api_client):
    assert api_client.get(URL, {"date": "gisteren"}).status_code == 400


def test_list_grouped(api_client, make_log, incident_types):
    a = make_log(incident_types["slaan"], 2, location="Keuken")
    b = make_log(incident_types["slaan"], 3, location="Keuken")

    res = api_client.get(URL, {"grouped": "1"})
    body = res.json()
    assert len(body) == 1
    assert body[0]["count"] == 5
    assert sorted(body[0]["combined_log_ids"]) == sorted([a.id, b.id])


def test_patch_count(api_client, make_log, incident_types):
    log = make_log(incident_types["slaan"])
    res = api_client.patch(f"{URL}{log.id}/", {"count": 6}, format="json")
    assert res.status_code == 200
    assert res.json()["count"] == 6


def test_patch_foreign_log_is_404(api_client, make_log, other_user, incident_types):
    log = make_log(incident_types["slaan"], user=other_user)
    assert api_client.patch(f"{URL}{log.id}/", {"count": 6}, format="json").status_code == 404


def test_delete_log(api_client, make_log, incident_types):
    log = make_log(incident_types["slaan"])
    assert api_client.delete(f"{URL}{log.id}/").status_code == 204
    assert not IncidentLog.objects.filter(id=log.id).exists()


def test_group_update_count(api_client, make_log, incident_types):
    a = make_log(incident_types["slaan"], 2, location="Keuken")
    b = make_log(incident_types["slaan"], 3, location="Keuken")

    res = api_client.post(f"{URL}group/update-count/", {"ids": [a.id, b.id], "count": 7}, format="json")
    assert res.status_code == 200
    assert res.json()["id"] == a.id
    assert res.json()["count"] == 7
    assert list(IncidentLog.objects.values_list("id", flat=True)) == [a.id]


def test_group_update_count_rolls_back_on_foreign_id(api_client, make_log, other_user, incident_types):
    a = make_log(incident_types["slaan"], 2)
    theirs = make_log(incident_types["slaan"], 3, user=other_user)

    res = api_client.post(f"{URL}group/update-count/", {"ids": [a.id, theirs.id], "count": 7}, format="json")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "validation_error"
    assert IncidentLog.objects.get(id=a.id).count == 2
    assert IncidentLog.objects.filter(id=theirs.id).exists()


def test_group_delete(api_client, make_log, incident_types):
    a = make_log(incident_types["slaan"])
    b = make_log(incident_types["slaan"])

    res = api_client.post(f"{URL}group/delete/", {"ids": [a.id, b.id]}, format="json")
    assert res.status_code == 200
    assert res.json() == {"deleted": 2}
    assert IncidentLog.objects.count() == 0


def test_group_delete_requires_ids(api_client):
    assert api_client.post(f"{URL}group/delete/", {"ids": []}, format="json").status_code == 400


def test_time_of_day_accepts_seconds(api_client, client_obj, incident_types):
    res = api_client.post(
        URL,
        {"client_id": str(client_obj.id), "incident_type_id": incident_types["huilen"].id, "time_of_day": "08:05:30"},
        format="json",
    )
    assert res.status_code == 201
    assert IncidentLog.objects.get(id=res.json()["id"]).time_of_day == time(8, 5, 30)
