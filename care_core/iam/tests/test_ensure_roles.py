# care_core/iam/tests/test_ensure_roles.py
from io import StringIO

import pytest
from django.contrib.auth.models import Group
from django.core.management import call_command

from care_core.common.permissions import Role

pytestmark = pytest.mark.django_db


def test_ensure_roles_is_idempotent():
    out = StringIO()
    call_command("ensure_roles", stdout=out)
    assert f"Newly created: {len(Role.values)}" in out.getvalue()

    out = StringIO()
    call_command("ensure_roles", stdout=out)
    assert "Newly created: 0" in out.getvalue()
    assert set(Group.objects.values_list("name", flat=True)) == set(Role.values)


def test_role_set_is_the_clinic_roles():
    assert set(Role.values) == {"ADMIN", "HCP", "PATIENT", "OD", "OPH", "ER"}
