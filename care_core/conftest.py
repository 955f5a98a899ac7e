# care_core/conftest.py
import datetime

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from rest_framework.test import APIClient

from care_core.common.permissions import Role
from care_core.hospitals.models import Hospital
from care_core.iam.services import ensure_role_groups
from care_core.patients.models import Gender, Patient

PASSWORD = "pass12345"


@pytest.fixture
def make_user(db):
    """
    Factory: make_user("alice", Role.HCP) -> active user in the given role groups.
    """
    ensure_role_groups()

    def _make(username: str, *roles: str, password: str = PASSWORD, **extra):
        User = get_user_model()
        user = User.objects.create_user(username=username, password=password, **extra)
        for role in roles:
            user.groups.add(Group.objects.get(name=role))
        return user

    return _make


@pytest.fixture
def client_for():
    """
    Factory: client_for(user) -> APIClient authenticated as that user.
    """
    def _client(user):
        c = APIClient()
        c.force_authenticate(user=user)
        return c

    return _client


@pytest.fixture
def admin_account(make_user):
    return make_user("admin", Role.ADMIN)


@pytest.fixture
def hcp_user(make_user):
    return make_user("hcp", Role.HCP)


@pytest.fixture
def oph_user(make_user):
    return make_user("oph", Role.OPH)


@pytest.fixture
def er_user(make_user):
    return make_user("er", Role.ER)


@pytest.fixture
def patient_user(make_user):
    return make_user("patient", Role.PATIENT)


@pytest.fixture
def other_patient_user(make_user):
    return make_user("patient2", Role.PATIENT)


@pytest.fixture
def admin_api(client_for, admin_account):
    return client_for(admin_account)


@pytest.fixture
def hcp_api(client_for, hcp_user):
    return client_for(hcp_user)


@pytest.fixture
def oph_api(client_for, oph_user):
    return client_for(oph_user)


@pytest.fixture
def patient_api(client_for, patient_user):
    return client_for(patient_user)


@pytest.fixture
def hospital(db):
    return Hospital.objects.create(name="General Hospital", address="100 Main St", state="NC", zip="27606")


@pytest.fixture
def patient(patient_user):
    """Demographics for `patient_user`, an adult."""
    return Patient.objects.create(
        user=patient_user,
        first_name="Pat",
        last_name="Smith",
        date_of_birth=datetime.date(1980, 5, 17),
        gender=Gender.FEMALE,
    )


@pytest.fixture
def visit_payload(patient, hcp_user, hospital):
    """A valid office visit form for an adult patient."""
    return {
        "patient": patient.user.username,
        "hcp": hcp_user.username,
        "hospital": hospital.name,
        "date": "2024-03-04T09:30:00Z",
        "type": "GENERAL_CHECKUP",
        "notes": "Annual physical.",
        "prescheduled": True,
        "height": 170.2,
        "weight": 160.5,
        "systolic": 120,
        "diastolic": 80,
        "hdl": 60,
        "ldl": 100,
        "tri": 150,
        "house_smoking_status": "NONSMOKING",
        "patient_smoking_status": "NEVER",
    }


@pytest.fixture
def surgery_payload(patient, oph_user, hospital):
    """A valid ophthalmology surgery form performed by `oph_user`."""
    return {
        "patient": patient.user.username,
        "hcp": oph_user.username,
        "hospital": hospital.name,
        "date": "2024-03-04T09:30:00Z",
        "type": "OPHTHALMOLOGY_SURGERY",
        "notes": "Left eye cataract removed.",
        "prescheduled": True,
        "height": 170.2,
        "weight": 160.5,
        "systolic": 120,
        "diastolic": 80,
        "hdl": 60,
        "ldl": 100,
        "tri": 150,
        "house_smoking_status": "NONSMOKING",
        "patient_smoking_status": "NEVER",
        "visual_acuity_od": 20,
        "visual_acuity_os": 40,
        "sphere_od": -1.5,
        "sphere_os": 2.0,
        "cylinder_od": -0.75,
        "cylinder_os": None,
        "axis_od": 90,
        "axis_os": None,
        "surgery_type": "CATARACT",
    }