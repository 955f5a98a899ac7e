# care_core/hospitals/tests/test_hospitals_api.py
import pytest

from care_core.audit.models import AuditEntry, TransactionType
from care_core.hospitals.models import Hospital

pytestmark = pytest.mark.django_db

ST_MARY = {"name": "St. Mary", "address": "1 Hospital Way", "state": "NC", "zip": "27607"}


def test_create_then_get_returns_same_payload(admin_api):
    r = admin_api.post("/api/v1/hospitals/", ST_MARY, format="json")
    assert r.status_code == 200, r.data
    assert r.data == ST_MARY

    g = admin_api.get("/api/v1/hospitals/St. Mary/")
    assert g.status_code == 200, g.data
    assert g.data == ST_MARY

    assert AuditEntry.objects.filter(transaction_type=TransactionType.HOSPITAL_CREATE, actor="admin").count() == 1


def test_duplicate_create_is_conflict_and_keeps_one_row(admin_api):
    assert admin_api.post("/api/v1/hospitals/", ST_MARY, format="json").status_code == 200

    dup = admin_api.post("/api/v1/hospitals/", ST_MARY, format="json")
    assert dup.status_code == 409, dup.data
    assert dup.data["error"]["code"] == "conflict"
    assert Hospital.objects.filter(name="St. Mary").count() == 1


def test_invalid_form_reports_every_field_and_persists_nothing(admin_api):
    r = admin_api.post(
        "/api/v1/hospitals/",
        {"name": "", "address": "x" * 101, "state": "ZZ", "zip": "123"},
        format="json",
    )
    assert r.status_code == 400, r.data
    details = r.data["error"]["details"]
    assert set(details) == {"name", "address", "state", "zip"}
    assert Hospital.objects.count() == 0
    assert AuditEntry.objects.count() == 0


def test_delete_unknown_is_404_every_time(admin_api):
    for _ in range(2):
        r = admin_api.delete("/api/v1/hospitals/Unknown/")
        assert r.status_code == 404, r.data
        assert r.data["error"]["code"] == "not_found"
        assert r.data["message"] == "No hospital found for name Unknown"
    # misses are not audited
    assert not AuditEntry.objects.exists()


def test_delete_returns_name(admin_api, hospital):
    r = admin_api.delete(f"/api/v1/hospitals/{hospital.name}/")
    assert r.status_code == 200
    assert r.data == hospital.name
    assert not Hospital.objects.filter(name=hospital.name).exists()
    assert AuditEntry.objects.filter(transaction_type=TransactionType.HOSPITAL_DELETE).exists()


def test_update_replaces_fields(admin_api, hospital):
    payload = {"name": hospital.name, "address": "200 Oak Ave", "state": "VA", "zip": "22030-1234"}
    r = admin_api.put(f"/api/v1/hospitals/{hospital.name}/", payload, format="json")
    assert r.status_code == 200, r.data
    assert r.data == payload

    hospital.refresh_from_db()
    assert hospital.state == "VA"
    assert AuditEntry.objects.filter(transaction_type=TransactionType.HOSPITAL_EDIT).count() == 1


def test_rename_leaves_exactly_one_row(admin_api, hospital):
    payload = {"name": "Renamed Hospital", "address": hospital.address, "state": hospital.state, "zip": hospital.zip}
    r = admin_api.put(f"/api/v1/hospitals/{hospital.name}/", payload, format="json")
    assert r.status_code == 200, r.data

    assert list(Hospital.objects.values_list("name", flat=True)) == ["Renamed Hospital"]
    assert admin_api.get("/api/v1/hospitals/General Hospital/").status_code == 404


def test_rename_onto_existing_name_is_conflict(admin_api, hospital):
    Hospital.objects.create(name="Other", address="9 Elm", state="NC", zip="27601")
    payload = {"name": "Other", "address": hospital.address, "state": hospital.state, "zip": hospital.zip}

    r = admin_api.put(f"/api/v1/hospitals/{hospital.name}/", payload, format="json")
    assert r.status_code == 409, r.data
    assert Hospital.objects.count() == 2


def test_update_unknown_is_404(admin_api):
    r = admin_api.put("/api/v1/hospitals/Nowhere/", ST_MARY, format="json")
    assert r.status_code == 404


def test_anyone_signed_in_can_read(client_for, patient_user, hospital):
    api = client_for(patient_user)
    r = api.get("/api/v1/hospitals/")
    assert r.status_code == 200
    assert [h["name"] for h in r.data] == [hospital.name]
    # hospital reads are not audited
    assert not AuditEntry.objects.exists()


def test_list_pages_only_when_asked(admin_api, hospital):
    r = admin_api.get("/api/v1/hospitals/?page=1&page_size=1")
    assert r.status_code == 200
    assert r.data["count"] == 1
    assert r.data["results"][0]["name"] == hospital.name


@pytest.mark.parametrize(
    "method,path",
    [
        ("post", "/api/v1/hospitals/"),
        ("put", "/api/v1/hospitals/General Hospital/"),
        ("put", "/api/v1/hospitals/Missing/"),
        ("delete", "/api/v1/hospitals/General Hospital/"),
        ("delete", "/api/v1/hospitals/Missing/"),
    ],
)
def test_non_admin_is_forbidden_whether_or_not_target_exists(hcp_api, hospital, method, path):
    r = getattr(hcp_api, method)(path, ST_MARY, format="json")
    assert r.status_code == 403, r.data
    assert r.data["error"]["code"] == "permission_denied"
    assert Hospital.objects.count() == 1
    assert not AuditEntry.objects.exists()


def test_unauthenticated_is_rejected():
    from rest_framework.test import APIClient

    r = APIClient().get("/api/v1/hospitals/")
    assert r.status_code in (401, 403)
