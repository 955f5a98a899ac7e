# care_core/visits/tests/test_office_visits_api.py
import datetime

import pytest

from care_core.audit.models import AuditEntry, TransactionType
from care_core.common.permissions import Role
from care_core.patients.models import Patient
from care_core.visits.models import OfficeVisit

pytestmark = pytest.mark.django_db

URL = "/api/v1/officevisits/"


def test_any_doctor_role_records_visits(client_for, make_user, visit_payload):
    od = make_user("optometrist", Role.OD)
    r = client_for(od).post(URL, {**visit_payload, "hcp": "optometrist"}, format="json")
    assert r.status_code == 200, r.data
    assert r.data["hcp"] == "optometrist"
    assert AuditEntry.objects.filter(transaction_type=TransactionType.OFFICE_VISIT_CREATE, actor="optometrist").exists()


def test_hcp_must_hold_a_doctor_role(hcp_api, visit_payload, er_user):
    r = hcp_api.post(URL, {**visit_payload, "hcp": "er"}, format="json")
    assert r.status_code == 400
    assert set(r.data["error"]["details"]) == {"hcp"}


def test_patient_and_admin_cannot_record_visits(patient_api, admin_api, visit_payload):
    assert patient_api.post(URL, visit_payload, format="json").status_code == 403
    assert admin_api.post(URL, visit_payload, format="json").status_code == 403
    assert not OfficeVisit.objects.exists()


def test_adult_needs_full_panel(hcp_api, visit_payload):
    data = {**visit_payload, "hdl": None, "patient_smoking_status": ""}
    r = hcp_api.post(URL, data, format="json")
    assert r.status_code == 400
    assert set(r.data["error"]["details"]) == {"hdl", "patient_smoking_status"}


def test_infant_needs_head_circumference_not_cholesterol(hcp_api, visit_payload, patient):
    Patient.objects.filter(pk=patient.pk).update(date_of_birth=datetime.date(2023, 6, 1))
    infant = {
        **visit_payload,
        "systolic": None,
        "diastolic": None,
        "hdl": None,
        "ldl": None,
        "tri": None,
        "patient_smoking_status": None,
    }

    r = hcp_api.post(URL, infant, format="json")
    assert r.status_code == 400
    assert set(r.data["error"]["details"]) == {"head_circumference"}

    r = hcp_api.post(URL, {**infant, "head_circumference": 45.3}, format="json")
    assert r.status_code == 200, r.data


def test_child_needs_blood_pressure(hcp_api, visit_payload, patient):
    Patient.objects.filter(pk=patient.pk).update(date_of_birth=datetime.date(2016, 1, 1))
    r = hcp_api.post(URL, {**visit_payload, "systolic": None, "hdl": None}, format="json")
    assert r.status_code == 400
    assert set(r.data["error"]["details"]) == {"systolic"}


def test_without_birth_date_metrics_are_optional(hcp_api, visit_payload, patient):
    Patient.objects.filter(pk=patient.pk).update(date_of_birth=None)
    bare = {key: visit_payload[key] for key in ("patient", "hcp", "hospital", "date", "type")}
    r = hcp_api.post(URL, bare, format="json")
    assert r.status_code == 200, r.data
    assert r.data["prescheduled"] is False
    assert r.data["notes"] == ""


def test_metric_values_are_rounded_to_one_decimal(hcp_api, visit_payload):
    r = hcp_api.post(URL, {**visit_payload, "height": 170.26}, format="json")
    assert r.status_code == 200, r.data
    assert r.data["height"] == 170.3


def test_patient_lists_only_own_visits(hcp_api, client_for, patient_user, other_patient_user, visit_payload):
    assert hcp_api.post(URL, visit_payload, format="json").status_code == 200
    Patient.objects.create(user=other_patient_user, first_name="Other", last_name="Person")
    assert hcp_api.post(URL, {**visit_payload, "patient": "patient2"}, format="json").status_code == 200

    assert len(hcp_api.get(URL).data) == 2

    mine = client_for(patient_user).get(URL).data
    assert [v["patient"] for v in mine] == ["patient"]


def test_view_markers(hcp_api, patient_api, visit_payload):
    visit_id = hcp_api.post(URL, visit_payload, format="json").data["id"]

    assert hcp_api.post(f"{URL}hcp/view/{visit_id}/", {}, format="json").status_code == 200
    assert patient_api.post(f"{URL}patient/view/{visit_id}/", {}, format="json").status_code == 200

    codes = set(AuditEntry.objects.values_list("transaction_type", flat=True))
    assert TransactionType.OFFICE_VISIT_HCP_VIEW in codes
    assert TransactionType.OFFICE_VISIT_PATIENT_VIEW in codes


def test_notes_length(hcp_api, visit_payload):
    r = hcp_api.post(URL, {**visit_payload, "notes": "n" * 256}, format="json")
    assert r.status_code == 400
    assert set(r.data["error"]["details"]) == {"notes"}


def test_blood_pressure_must_be_above_zero(hcp_api, visit_payload):
    r = hcp_api.post(URL, {**visit_payload, "systolic": 0, "diastolic": 0}, format="json")
    assert r.status_code == 400
    assert set(r.data["error"]["details"]) == {"systolic", "diastolic"}
    assert not OfficeVisit.objects.exists()


@pytest.mark.parametrize("who", ["patient_api", "admin_api"])
@pytest.mark.parametrize("method", ["put", "delete"])
def test_patient_and_admin_cannot_change_visits(request, who, method, hcp_api, visit_payload):
    visit_id = hcp_api.post(URL, visit_payload, format="json").data["id"]
    api = request.getfixturevalue(who)

    for target in (visit_id, 999):
        r = getattr(api, method)(f"{URL}{target}/", {**visit_payload, "weight": 150.0}, format="json")
        assert r.status_code == 403

    assert OfficeVisit.objects.get(pk=visit_id).weight == visit_payload["weight"]
    assert not AuditEntry.objects.filter(
        transaction_type__in=[TransactionType.OFFICE_VISIT_EDIT, TransactionType.OFFICE_VISIT_DELETE]
    ).exists()
