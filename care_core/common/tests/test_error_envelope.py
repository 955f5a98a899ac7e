# care_core/common/tests/test_error_envelope.py
from unittest import mock

import pytest
from django.db import DatabaseError

from care_core.hospitals.models import Hospital

pytestmark = pytest.mark.django_db


def test_not_found_uses_envelope_and_echoes_request_id(admin_api):
    r = admin_api.get("/api/v1/hospitals/Nope/", HTTP_X_REQUEST_ID="req-123")
    assert r.status_code == 404

    body = r.json()
    assert body["message"] == body["error"]["message"]
    assert body["error"]["code"] == "not_found"
    assert body["error"]["details"] is None
    assert body["error"]["request_id"] == "req-123"
    assert r["X-Request-Id"] == "req-123"


def test_validation_message_names_bad_fields(admin_api):
    r = admin_api.post("/api/v1/hospitals/", {"name": "X"}, format="json")
    assert r.status_code == 400
    assert r.data["error"]["code"] == "validation_error"
    assert r.data["message"] == "Invalid value for: address, state, zip"


def test_persistence_failure_is_internal_failure(admin_api):
    payload = {"name": "St. Mary", "address": "1 Hospital Way", "state": "NC", "zip": "27607"}
    with mock.patch.object(Hospital, "save", side_effect=DatabaseError("disk full")):
        r = admin_api.post("/api/v1/hospitals/", payload, format="json")

    assert r.status_code == 500
    assert r.data["error"]["code"] == "internal_failure"
    assert "disk full" not in str(r.data)
