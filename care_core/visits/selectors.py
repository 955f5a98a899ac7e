# care_core/visits/selectors.py
from __future__ import annotations

from datetime import date

from django.contrib.auth import get_user_model

from care_core.common.permissions import DOCTOR_ROLES


def doctor_user(username: str):
    """The user behind a username if they hold a doctor role (HCP/OD/OPH), else None."""
    return (
        get_user_model()
        ._default_manager.filter(username=username, groups__name__in=[str(r) for r in DOCTOR_ROLES])
        .distinct()
        .first()
    )


def age_on(dob: date, when: date) -> int:
    """Completed years between a birth date and a day."""
    return when.year - dob.year - ((when.month, when.day) < (dob.month, dob.day))
