# care_core/hospitals/selectors.py
from __future__ import annotations

from care_core.hospitals.models import Hospital


def hospital_by_name(name: str) -> Hospital | None:
    return Hospital.objects.filter(name=name).first()
