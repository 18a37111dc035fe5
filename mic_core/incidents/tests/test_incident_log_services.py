# mic_core/incidents/tests/test_incident_log_services.py
from datetime import timedelta

import pytest
from django.utils import timezone

from mic_core.incidents.models import IncidentLog
from mic_core.incidents.services import IncidentLogService, IncidentTypeService

pytestmark = pytest.mark.django_db


def test_log_incident_defaults(user, client_obj, incident_types):
    log = IncidentLogService.log_incident(
        user_id=user.id,
        client_id=client_obj.id,
        incident_type_id=incident_types["slaan"].id,
        location="  ",
    )
    assert log.count == 1
    assert log.log_date == timezone.localdate()
    assert log.location is None
    assert log.intervention_successful is True
    assert log.severity == 4


def test_log_incident_rejects_inactive_client(user, client_obj, incident_types):
    client_obj.is_active = False
    client_obj.save(update_fields=["is_active"])

    with pytest.raises(ValueError, match="niet meer actief"):
        IncidentLogService.log_incident(
            user_id=user.id, client_id=client_obj.id, incident_type_id=incident_types["slaan"].id
        )


def test_log_incident_rejects_unknown_type(user, client_obj):
    with pytest.raises(ValueError, match="niet gevonden"):
        IncidentLogService.log_incident(user_id=user.id, client_id=client_obj.id, incident_type_id=4242)


def test_update_count_requires_positive(user, make_log, incident_types):
    log = make_log(incident_types["slaan"])
    with pytest.raises(ValueError):
        IncidentLogService.update_count(user_id=user.id, log_id=log.id, count=0)


def test_update_count_of_someone_else_is_not_found(other_user, make_log, incident_types):
    log = make_log(incident_types["slaan"])
    with pytest.raises(IncidentLog.DoesNotExist):
        IncidentLogService.update_count(user_id=other_user.id, log_id=log.id, count=3)


def test_update_group_count_keeps_first_and_deletes_rest(user, make_log, incident_types):
    a = make_log(incident_types["slaan"], 2, location="Keuken")
    b = make_log(incident_types["slaan"], 3, location="Keuken")
    c = make_log(incident_types["slaan"], 1, location="Keuken")

    keeper = IncidentLogService.update_group_count(user_id=user.id, ids=[a.id, b.id, c.id], count=4)

    assert keeper.id == a.id
    assert IncidentLog.objects.get(id=a.id).count == 4
    assert not IncidentLog.objects.filter(id__in=[b.id, c.id]).exists()


def test_update_group_count_is_all_or_nothing(user, other_user, make_log, incident_types):
    mine = make_log(incident_types["slaan"], 2)
    theirs = make_log(incident_types["slaan"], 3, user=other_user)

    with pytest.raises(ValueError, match=str(theirs.id)):
        IncidentLogService.update_group_count(user_id=user.id, ids=[mine.id, theirs.id], count=9)

    assert IncidentLog.objects.get(id=mine.id).count == 2
    assert IncidentLog.objects.get(id=theirs.id).count == 3


def test_delete_group(user, make_log, incident_types):
    a = make_log(incident_types["schelden"])
    b = make_log(incident_types["schelden"])
    keep = make_log(incident_types["huilen"])

    assert IncidentLogService.delete_group(user_id=user.id, ids=[a.id, b.id, a.id]) == 2
    assert list(IncidentLog.objects.values_list("id", flat=True)) == [keep.id]


def test_delete_group_missing_id_deletes_nothing(user, make_log, incident_types):
    a = make_log(incident_types["schelden"])

    with pytest.raises(ValueError):
        IncidentLogService.delete_group(user_id=user.id, ids=[a.id, a.id + 1000])
    assert IncidentLog.objects.filter(id=a.id).exists()


def test_delete_group_requires_ids(user):
    with pytest.raises(ValueError, match="Geen registraties"):
        IncidentLogService.delete_group(user_id=user.id, ids=[])


def test_incident_type_validation(db):
    with pytest.raises(ValueError):
        IncidentTypeService.create_type(data={"name": "X", "color_code": "rood"})
    with pytest.raises(ValueError):
        IncidentTypeService.create_type(data={"name": "X", "severity_level": 9})
    with pytest.raises(ValueError):
        IncidentTypeService.create_type(data={"name": "X", "category": "financieel"})
    with pytest.raises(ValueError):
        IncidentTypeService.create_type(data={"name": "   "})


def test_incident_type_normalizes_category_and_color(db):
    itype = IncidentTypeService.create_type(data={"name": "Duwen", "category": " Fysiek ", "color_code": ""})
    assert itype.category == "fysiek"
    assert itype.color_code is None


def test_log_date_can_be_in_the_past(user, client_obj, incident_types):
    yesterday = timezone.localdate() - timedelta(days=1)
    log = IncidentLogService.log_incident(
        user_id=user.id,
        client_id=client_obj.id,
        incident_type_id=incident_types["huilen"].id,
        log_date=yesterday,
    )
    assert log.log_date == yesterday
