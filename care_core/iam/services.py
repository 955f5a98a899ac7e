# care_core/iam/services.py
from __future__ import annotations

from typing import Iterable

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group

from care_core.audit.models import TransactionType
from care_core.common.api.exceptions import ConflictError
from care_core.common.context import RequestContext
from care_core.common.permissions import Role
from care_core.common.repository import ModelRepository
from care_core.common.workflow import AuditCodes, CrudWorkflow
from care_core.iam.forms import UserForm


def ensure_role_groups() -> int:
    created = 0
    for name in Role.values:
        _, was_created = Group.objects.get_or_create(name=name)
        created += 1 if was_created else 0
    return created


def set_roles(user, roles: Iterable[str]) -> None:
    groups = [Group.objects.get_or_create(name=str(r))[0] for r in roles]
    user.groups.set(groups)


class UserService(CrudWorkflow):
    resource_label = "user"
    key_label = "username"
    form_class = UserForm
    codes = AuditCodes(
        create=TransactionType.USER_CREATE,
        edit=TransactionType.USER_EDIT,
        delete=TransactionType.USER_DELETE,
    )

    def __init__(self):
        self.repository = ModelRepository(get_user_model(), key_field="username")

    def key_from_form(self, attrs: dict):
        return attrs["username"].strip()

    def target_of(self, obj) -> str:
        return obj.get_username()

    def check_identity(self, key, attrs: dict) -> None:
        # audit entries name users by username, so it never changes after creation
        if attrs["username"].strip() != key:
            raise ConflictError("The username provided does not match the user being updated")

    def save_new(self, ctx: RequestContext, attrs: dict):
        user = self.repository.model(username=attrs["username"].strip(), is_active=attrs.get("enabled", True))
        user.set_password(attrs["password"])
        self.repository.save(user, force_insert=True)
        set_roles(user, attrs["roles"])
        return user

    def replace(self, ctx: RequestContext, obj, attrs: dict):
        obj.is_active = attrs.get("enabled", True)
        if attrs.get("password"):
            obj.set_password(attrs["password"])
        self.repository.save(obj)
        set_roles(obj, attrs["roles"])
        return obj
