# care_core/common/tests/test_permissions.py
import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group

from care_core.common.context import context_from_request
from care_core.common.permissions import (
    Access,
    HasAnyRole,
    HasRole,
    IsAuthenticatedOnly,
    Role,
    check_access,
    user_roles,
)


def test_has_role():
    assert check_access({Role.OPH}, HasRole(Role.OPH)) is Access.ALLOWED
    assert check_access({Role.HCP}, HasRole(Role.OPH)) is Access.FORBIDDEN


def test_has_any_role():
    req = HasAnyRole(Role.HCP, Role.OD, Role.OPH, Role.PATIENT)
    assert check_access({Role.PATIENT}, req)
    assert not check_access({Role.ER}, req)


def test_admin_has_no_implicit_bypass():
    assert check_access({Role.ADMIN}, HasRole(Role.OPH)) is Access.FORBIDDEN


def test_undeclared_requirement_is_denied():
    assert check_access({Role.ADMIN}, None) is Access.FORBIDDEN


def test_authenticated_only_ignores_roles():
    assert check_access(set(), IsAuthenticatedOnly()) is Access.ALLOWED


@pytest.mark.django_db
def test_user_roles_ignore_unknown_groups_and_promote_superuser():
    User = get_user_model()
    u = User.objects.create_user(username="u1", password="pass12345")
    u.groups.add(Group.objects.create(name="Friends"), Group.objects.create(name=Role.ER))
    assert user_roles(u) == {Role.ER}

    su = User.objects.create_superuser(username="root", password="pass12345")
    assert user_roles(su) == {Role.ADMIN}


@pytest.mark.django_db
def test_context_marks_patient_only_callers(make_user, rf):
    request = rf.get("/")
    request.user = make_user("pat", Role.PATIENT)
    ctx = context_from_request(request)
    assert ctx.actor == "pat"
    assert ctx.is_patient_only

    request.user = make_user("dual", Role.PATIENT, Role.HCP)
    ctx = context_from_request(request)
    assert ctx.is_doctor
    assert not ctx.is_patient_only
