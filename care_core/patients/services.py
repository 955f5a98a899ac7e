# care_core/patients/services.py
from __future__ import annotations

from django.db.models import QuerySet

from care_core.audit.models import TransactionType
from care_core.common.api.exceptions import ConflictError
from care_core.common.context import RequestContext
from care_core.common.repository import ModelRepository
from care_core.common.workflow import AuditCodes, CrudWorkflow
from care_core.patients.forms import PatientForm
from care_core.patients.models import Gender, Patient
from care_core.patients.selectors import patient_user

OPTIONAL_TEXT = ("email", "phone", "address_line1", "address_line2", "city", "state", "zip")


class PatientService(CrudWorkflow):
    """
    Demographics keyed by username. A patient-only caller sees and edits just their own record.
    """
    resource_label = "patient"
    key_label = "username"
    form_class = PatientForm
    codes = AuditCodes(
        create=TransactionType.PATIENT_DEMOGRAPHICS_CREATE,
        edit=TransactionType.PATIENT_DEMOGRAPHICS_EDIT,
        delete=TransactionType.PATIENT_DEMOGRAPHICS_DELETE,
        view=TransactionType.PATIENT_DEMOGRAPHICS_VIEW,
    )

    def __init__(self):
        self.repository = ModelRepository(Patient, key_field="user__username", select_related=("user",))

    def key_from_form(self, attrs: dict):
        return attrs["username"].strip()

    def build(self, ctx: RequestContext, attrs: dict) -> dict:
        fields = {
            "first_name": attrs["first_name"].strip(),
            "last_name": attrs["last_name"].strip(),
            "date_of_birth": attrs.get("date_of_birth"),
            "gender": attrs.get("gender") or Gender.NOT_SPECIFIED,
        }
        for name in OPTIONAL_TEXT:
            fields[name] = (attrs.get(name) or "").strip()
        return fields

    def save_new(self, ctx: RequestContext, attrs: dict) -> Patient:
        user = patient_user(self.key_from_form(attrs))
        return self.repository.create(user=user, **self.build(ctx, attrs))

    def target_of(self, obj: Patient) -> str:
        return obj.username

    def describe(self, obj: Patient) -> str:
        return f"demographics of {obj.username}"

    def visible_to(self, ctx: RequestContext, obj: Patient) -> bool:
        if ctx.is_patient_only:
            return obj.username == ctx.actor
        return True

    def scope_queryset(self, ctx: RequestContext, qs: QuerySet) -> QuerySet:
        if ctx.is_patient_only:
            return qs.filter(user__username=ctx.actor)
        return qs

    def check_identity(self, key, attrs: dict) -> None:
        if attrs["username"].strip() != key:
            raise ConflictError("The username provided does not match the patient being updated")
