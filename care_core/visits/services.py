# care_core/visits/services.py
from __future__ import annotations

from typing import Iterable

from django.db.models import QuerySet
from django.utils import timezone

from care_core.audit.models import TransactionType
from care_core.common.api.exceptions import ConflictError
from care_core.common.context import RequestContext
from care_core.common.repository import ModelRepository
from care_core.common.workflow import AuditCodes, CrudWorkflow, ExtraEntry
from care_core.visits.forms import OfficeVisitForm, OphthalmologySurgeryForm
from care_core.visits.models import METRIC_FIELDS, OfficeVisit, OphthalmologySurgery

VISIT_FIELDS = ("patient", "hcp", "hospital", "date", "type", "notes", "prescheduled")
ONE_DECIMAL = ("height", "weight", "head_circumference")


def _visit_day(visit) -> str:
    return f"{timezone.localdate(visit.date):%m/%d/%Y}"


class VisitService(CrudWorkflow):
    """
    Shared workflow for visit-shaped records: a store-assigned id, a health metrics panel,
    and patient-only callers narrowed to their own visits.
    """
    key_label = "id"
    extra_fields: tuple = ()

    def key_from_form(self, attrs: dict):
        return attrs.get("id")

    def build(self, ctx: RequestContext, attrs: dict) -> dict:
        fields = {name: attrs.get(name) for name in VISIT_FIELDS + METRIC_FIELDS + self.extra_fields}
        fields["notes"] = (fields["notes"] or "").strip()
        fields["prescheduled"] = bool(fields["prescheduled"])
        fields["house_smoking_status"] = fields["house_smoking_status"] or ""
        fields["patient_smoking_status"] = fields["patient_smoking_status"] or ""
        for name in ONE_DECIMAL:
            if fields[name] is not None:
                fields[name] = round(fields[name], 1)
        return fields

    def target_of(self, obj) -> str:
        return obj.patient.get_username()

    def visible_to(self, ctx: RequestContext, obj) -> bool:
        if ctx.is_patient_only:
            return obj.patient.get_username() == ctx.actor
        return True

    def scope_queryset(self, ctx: RequestContext, qs: QuerySet) -> QuerySet:
        if ctx.is_patient_only:
            return qs.filter(patient__username=ctx.actor)
        return qs

    def check_identity(self, key, attrs: dict) -> None:
        form_id = attrs.get("id")
        if form_id is not None and str(form_id) != str(key):
            raise ConflictError(f"The ID provided does not match the ID of the {self.resource_label} being updated")

    def snapshot(self, obj) -> dict:
        return obj.metrics()

    def change_entries(self, ctx: RequestContext, before, after, attrs: dict) -> Iterable[ExtraEntry]:
        # the date/notes can change without touching the metrics panel
        if before != after.metrics():
            patient = after.patient.get_username()
            yield (
                self.codes.edit,
                patient,
                f"{after.hcp.get_username()} updated basic health metrics for {patient} from {_visit_day(after)}",
            )

    # -----------------------------
    # View markers
    # -----------------------------

    def record_hcp_view(self, ctx: RequestContext, key) -> None:
        visit = self.lookup(ctx, key)
        patient = visit.patient.get_username()
        self.log(
            ctx,
            self.codes.view,
            target=patient,
            detail=f"{ctx.actor} viewed basic health metrics for {patient} from {_visit_day(visit)}",
        )

    def record_patient_view(self, ctx: RequestContext, key) -> None:
        visit = self.lookup(ctx, key)
        patient = visit.patient.get_username()
        if patient != ctx.actor:
            raise self.not_found(key)
        self.log(
            ctx,
            self.codes.patient_view,
            target=patient,
            detail=f"{patient} viewed their basic health metrics from {_visit_day(visit)}",
        )


class OfficeVisitService(VisitService):
    resource_label = "office visit"
    form_class = OfficeVisitForm
    codes = AuditCodes(
        create=TransactionType.OFFICE_VISIT_CREATE,
        edit=TransactionType.OFFICE_VISIT_EDIT,
        delete=TransactionType.OFFICE_VISIT_DELETE,
        view=TransactionType.OFFICE_VISIT_HCP_VIEW,
        patient_view=TransactionType.OFFICE_VISIT_PATIENT_VIEW,
    )

    def __init__(self):
        self.repository = ModelRepository(OfficeVisit, select_related=("patient", "hcp", "hospital"))


class OphthalmologySurgeryService(VisitService):
    resource_label = "ophthalmology surgery"
    form_class = OphthalmologySurgeryForm
    extra_fields = (
        "visual_acuity_od",
        "visual_acuity_os",
        "sphere_od",
        "sphere_os",
        "cylinder_od",
        "cylinder_os",
        "axis_od",
        "axis_os",
        "surgery_type",
    )
    codes = AuditCodes(
        create=TransactionType.OPHTHALMOLOGY_SURGERY_CREATE,
        edit=TransactionType.OPHTHALMOLOGY_SURGERY_EDIT,
        delete=TransactionType.OPHTHALMOLOGY_SURGERY_DELETE,
        view=TransactionType.OPHTHALMOLOGY_SURGERY_HCP_VIEW,
        patient_view=TransactionType.OPHTHALMOLOGY_SURGERY_PATIENT_VIEW,
    )

    def __init__(self):
        self.repository = ModelRepository(OphthalmologySurgery, select_related=("patient", "hcp", "hospital"))
