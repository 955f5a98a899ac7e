# care_core/patients/selectors.py
from __future__ import annotations

from django.contrib.auth import get_user_model

from care_core.common.permissions import Role
from care_core.patients.models import Patient


def patient_by_username(username: str) -> Patient | None:
    return Patient.objects.select_related("user").filter(user__username=username).first()


def patient_user(username: str):
    """The user behind a username if they hold the PATIENT role, else None."""
    return (
        get_user_model()
        ._default_manager.filter(username=username, groups__name=Role.PATIENT)
        .first()
    )
