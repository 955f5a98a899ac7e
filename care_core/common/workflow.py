# care_core/common/workflow.py
"""
The role-gated CRUD-with-audit workflow shared by every resource.

Views authorize (RolePermission) and translate HTTP; a CrudWorkflow subclass per resource
supplies the form, the repository and a few hooks, and this module does the rest:
validation, key conflicts, persistence and the audit append, all in one unit of work.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple, Type

from django.db import transaction
from django.db.models import Model, QuerySet
from rest_framework import serializers
from rest_framework.exceptions import NotFound

from care_core.audit.services import AuditService
from care_core.common.api.exceptions import ConflictError
from care_core.common.context import RequestContext
from care_core.common.repository import ModelRepository

# (transaction_type, target, detail)
ExtraEntry = Tuple[str, Optional[str], str]


@dataclass(frozen=True)
class AuditCodes:
    create: str
    edit: str
    delete: str
    # None means reads are not audited for this resource
    view: Optional[str] = None
    # when set, patient-only callers are logged under this code instead of `view`
    patient_view: Optional[str] = None


class CrudWorkflow:
    """
    Create / read / update / delete / list for one resource type.

    Subclasses set `resource_label`, `key_label`, `form_class`, `codes` and
    `repository`, and override hooks where the resource differs:

      - key_from_form(attrs): the key a submitted form claims, or None if the store assigns it
      - build(ctx, attrs): model field values for a new/replacement record
      - save_new / replace / rename: persistence of the built fields; rename must be
        overridden whenever `renamable = True`
      - target_of(obj): whose record this is (audit target)
      - visible_to(ctx, obj) / scope_queryset(ctx, qs): row-level narrowing
      - check_identity(key, attrs): path/body key agreement on update
      - change_entries(ctx, before, after, attrs): extra audit rows on update
    """

    resource_label = "resource"
    key_label = "id"
    form_class: Type[serializers.Serializer]
    codes: AuditCodes
    repository: ModelRepository
    renamable = False

    audit = AuditService

    # -----------------------------
    # Hooks
    # -----------------------------

    def key_from_form(self, attrs: dict) -> Any:
        return None

    def build(self, ctx: RequestContext, attrs: dict) -> dict:
        return dict(attrs)

    def save_new(self, ctx: RequestContext, attrs: dict) -> Model:
        return self.repository.create(**self.build(ctx, attrs))

    def replace(self, ctx: RequestContext, obj: Model, attrs: dict) -> Model:
        return self.repository.update(obj, **self.build(ctx, attrs))

    def rename(self, ctx: RequestContext, obj: Model, attrs: dict) -> Model:
        """Move the record to a new natural key. Required when `renamable = True`."""
        raise NotImplementedError(f"{self.resource_label} keys cannot be changed")

    def target_of(self, obj: Model) -> Optional[str]:
        return None

    def describe(self, obj: Model) -> str:
        return f"{self.resource_label} {self.repository.key_of(obj)}"

    def visible_to(self, ctx: RequestContext, obj: Model) -> bool:
        return True

    def scope_queryset(self, ctx: RequestContext, qs: QuerySet) -> QuerySet:
        return qs

    def check_identity(self, key: Any, attrs: dict) -> None:
        return None

    def snapshot(self, obj: Model) -> Any:
        return None

    def change_entries(self, ctx: RequestContext, before: Any, after: Model, attrs: dict) -> Iterable[ExtraEntry]:
        return ()

    def form_context(self, ctx: RequestContext, instance: Optional[Model] = None) -> dict:
        return {"ctx": ctx, "instance": instance}

    # -----------------------------
    # Internals
    # -----------------------------

    def validate(self, ctx: RequestContext, data: Any, *, instance: Optional[Model] = None) -> dict:
        form = self.form_class(data=data, context=self.form_context(ctx, instance))
        form.is_valid(raise_exception=True)
        return dict(form.validated_data)

    def not_found(self, key: Any) -> NotFound:
        return NotFound(f"No {self.resource_label} found for {self.key_label} {key}")

    def lookup(self, ctx: RequestContext, key: Any) -> Model:
        obj = self.repository.get_by_key(key)
        # rows the caller may not see are reported exactly like missing rows
        if obj is None or not self.visible_to(ctx, obj):
            raise self.not_found(key)
        return obj

    def log(self, ctx: RequestContext, transaction_type: str, *, target: Optional[str] = None, detail: str = "") -> None:
        self.audit.record(
            transaction_type=transaction_type,
            actor=ctx.actor,
            target=target,
            detail=detail,
            request_id=ctx.request_id,
        )

    def view_code(self, ctx: RequestContext) -> Optional[str]:
        if self.codes.patient_view and ctx.is_patient_only:
            return self.codes.patient_view
        return self.codes.view

    # -----------------------------
    # Operations
    # -----------------------------

    def list(self, ctx: RequestContext) -> QuerySet:
        return self.scope_queryset(ctx, self.repository.list())

    def get(self, ctx: RequestContext, key: Any, *, audit: bool = True) -> Model:
        obj = self.lookup(ctx, key)
        code = self.view_code(ctx) if audit else None
        if code:
            self.log(ctx, code, target=self.target_of(obj), detail=f"Viewed {self.describe(obj)}")
        return obj

    def create(self, ctx: RequestContext, data: Any) -> Model:
        attrs = self.validate(ctx, data)

        with transaction.atomic():
            key = self.key_from_form(attrs)
            if key is not None and self.repository.get_by_key(key) is not None:
                raise ConflictError(f"{self.resource_label.capitalize()} with the {self.key_label} {key} already exists")

            obj = self.save_new(ctx, attrs)
            self.log(ctx, self.codes.create, target=self.target_of(obj), detail=f"Created {self.describe(obj)}")
        return obj

    def update(self, ctx: RequestContext, key: Any, data: Any) -> Model:
        with transaction.atomic():
            current = self.lookup(ctx, key)
            attrs = self.validate(ctx, data, instance=current)
            self.check_identity(key, attrs)

            before = self.snapshot(current)
            old_key = self.repository.key_of(current)
            new_key = self.key_from_form(attrs)

            if self.renamable and new_key is not None and new_key != old_key:
                if self.repository.get_by_key(new_key) is not None:
                    raise ConflictError(
                        f"{self.resource_label.capitalize()} with the {self.key_label} {new_key} already exists"
                    )
                obj = self.rename(ctx, current, attrs)
                detail = f"Renamed {self.resource_label} {old_key} to {new_key}"
            else:
                obj = self.replace(ctx, current, attrs)
                detail = f"Updated {self.describe(obj)}"

            for code, target, extra in self.change_entries(ctx, before, obj, attrs):
                self.log(ctx, code, target=target, detail=extra)
            self.log(ctx, self.codes.edit, target=self.target_of(obj), detail=detail)
        return obj

    def delete(self, ctx: RequestContext, key: Any) -> Any:
        with transaction.atomic():
            obj = self.lookup(ctx, key)
            key_value = self.repository.key_of(obj)
            target = self.target_of(obj)
            description = self.describe(obj)

            self.repository.delete(obj)
            self.log(ctx, self.codes.delete, target=target, detail=f"Deleted {description}")
        return key_value
