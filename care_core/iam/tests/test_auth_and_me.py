# care_core/iam/tests/test_auth_and_me.py
import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from care_core.audit.models import AuditEntry, TransactionType
from care_core.common.permissions import Role
from care_core.conftest import PASSWORD

pytestmark = pytest.mark.django_db


def test_me_requires_auth():
    """
    Fresh APIClient: no force_authenticate, no cookies.
    """
    res = APIClient().get("/api/me/")
    assert res.status_code in (401, 403)


def test_login_sets_cookies_and_is_audited(hcp_user, settings):
    res = APIClient().post("/api/auth/login/", {"username": "hcp", "password": PASSWORD}, format="json")
    assert res.status_code == 200, res.data

    assert settings.SIMPLE_JWT["AUTH_COOKIE"] in res.cookies
    assert settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"] in res.cookies
    assert AuditEntry.objects.filter(transaction_type=TransactionType.LOGIN_SUCCESS, actor="hcp").exists()


def test_bad_password_is_401_and_audited(hcp_user):
    res = APIClient().post("/api/auth/login/", {"username": "hcp", "password": "wrong-pass"}, format="json")
    assert res.status_code == 401
    assert res.data["error"]["code"] == "not_authenticated"
    assert AuditEntry.objects.filter(transaction_type=TransactionType.LOGIN_FAILURE, actor="hcp").exists()


def test_bearer_token_reaches_me(make_user):
    user = make_user("dual", Role.PATIENT, Role.OD)
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(user).access_token}")

    res = client.get("/api/v1/me/")
    assert res.status_code == 200
    body = res.json()
    assert body["user"]["username"] == "dual"
    assert body["user"]["roles"] == ["OD", "PATIENT"]
    assert body["user"]["is_doctor"] is True


def test_access_cookie_authenticates(hcp_user, settings):
    client = APIClient()
    client.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]] = str(RefreshToken.for_user(hcp_user).access_token)

    res = client.get("/api/me/")
    assert res.status_code == 200
    assert res.json()["user"]["username"] == "hcp"


def test_refresh_from_cookie(hcp_user, settings):
    client = APIClient()
    client.cookies[settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"]] = str(RefreshToken.for_user(hcp_user))

    res = client.post("/api/auth/refresh/", {}, format="json")
    assert res.status_code == 200, res.data
    assert "access" in res.data


def test_logout_clears_cookies_and_is_audited(hcp_api, settings):
    res = hcp_api.post("/api/auth/logout/")
    assert res.status_code == 200
    assert res.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]].value == ""
    assert AuditEntry.objects.filter(transaction_type=TransactionType.LOGOUT, actor="hcp").exists()


def test_oversized_username_failure_is_audited_clipped():
    res = APIClient().post("/api/auth/login/", {"username": "u" * 200, "password": "wrong-pass"}, format="json")
    assert res.status_code == 401

    entry = AuditEntry.objects.get(transaction_type=TransactionType.LOGIN_FAILURE)
    assert entry.actor == "u" * 150
