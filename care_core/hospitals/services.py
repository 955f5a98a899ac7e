# care_core/hospitals/services.py
from __future__ import annotations

from care_core.audit.models import TransactionType
from care_core.common.context import RequestContext
from care_core.common.repository import ModelRepository
from care_core.common.workflow import AuditCodes, CrudWorkflow
from care_core.hospitals.forms import HospitalForm
from care_core.hospitals.models import Hospital


class HospitalService(CrudWorkflow):
    resource_label = "hospital"
    key_label = "name"
    form_class = HospitalForm
    renamable = True
    codes = AuditCodes(
        create=TransactionType.HOSPITAL_CREATE,
        edit=TransactionType.HOSPITAL_EDIT,
        delete=TransactionType.HOSPITAL_DELETE,
    )

    def __init__(self):
        self.repository = ModelRepository(Hospital, key_field="name")

    def key_from_form(self, attrs: dict):
        return attrs["name"].strip()

    def build(self, ctx: RequestContext, attrs: dict) -> dict:
        return {
            "name": attrs["name"].strip(),
            "address": attrs["address"].strip(),
            "state": attrs["state"],
            "zip": attrs["zip"],
        }

    def rename(self, ctx: RequestContext, obj: Hospital, attrs: dict) -> Hospital:
        """
        The name is the primary key, so a rename is insert + re-point dependents + delete.
        Runs inside the caller's transaction: afterwards exactly one row exists.
        """
        renamed = self.repository.create(**self.build(ctx, attrs))

        for rel in Hospital._meta.related_objects:
            if not (rel.one_to_many or rel.one_to_one):
                continue
            rel.related_model._default_manager.filter(**{rel.field.name: obj}).update(**{rel.field.name: renamed})

        self.repository.delete(obj)
        return renamed
