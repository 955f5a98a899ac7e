# care_core/common/permissions.py

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Set, Union

from django.db import models
from rest_framework.permissions import BasePermission


class Role(models.TextChoices):
    """
    Role names double as Django auth Group names.
    """
    ADMIN = "ADMIN", "Administrator"
    HCP = "HCP", "Health care provider"
    PATIENT = "PATIENT", "Patient"
    OD = "OD", "Optometrist"
    OPH = "OPH", "Ophthalmologist"
    ER = "ER", "Emergency responder"


DOCTOR_ROLES = frozenset({Role.HCP, Role.OD, Role.OPH})
ALL_ROLES = frozenset(Role.values)


def user_roles(user) -> Set[str]:
    """
    Resolve roles from:
    1) Django groups: user.groups
    2) superuser flag (treated as ADMIN)

    Unknown group names are ignored so ad-hoc groups never grant capabilities.
    """
    roles: Set[str] = set()

    if not user or not getattr(user, "is_authenticated", False):
        return roles

    if getattr(user, "is_superuser", False):
        roles.add(Role.ADMIN)

    if hasattr(user, "groups"):
        roles.update(name for name in user.groups.values_list("name", flat=True) if name in ALL_ROLES)

    return roles


def is_doctor(roles: Iterable[str]) -> bool:
    return bool(DOCTOR_ROLES & set(roles))


# -----------------------------
# Capability check
# -----------------------------

class Access(enum.Enum):
    ALLOWED = "allowed"
    FORBIDDEN = "forbidden"

    def __bool__(self) -> bool:
        return self is Access.ALLOWED


@dataclass(frozen=True)
class HasRole:
    role: str


@dataclass(frozen=True)
class HasAnyRole:
    roles: frozenset

    def __init__(self, *roles: str):
        object.__setattr__(self, "roles", frozenset(roles))


@dataclass(frozen=True)
class IsAuthenticatedOnly:
    """Any authenticated principal, regardless of roles."""


Requirement = Union[HasRole, HasAnyRole, IsAuthenticatedOnly]


def check_access(roles: Iterable[str], requirement: Requirement | None) -> Access:
    """
    Evaluate a role requirement against a principal's role set.
    A missing requirement means the operation was never declared: deny.
    """
    roles = set(roles)
    if requirement is None:
        return Access.FORBIDDEN
    if isinstance(requirement, IsAuthenticatedOnly):
        return Access.ALLOWED
    if isinstance(requirement, HasRole):
        return Access.ALLOWED if requirement.role in roles else Access.FORBIDDEN
    if isinstance(requirement, HasAnyRole):
        return Access.ALLOWED if roles & requirement.roles else Access.FORBIDDEN
    return Access.FORBIDDEN


class RolePermission(BasePermission):
    """
    Role-based access gate for ViewSets.

    Views declare `required_roles_per_action = {action: Requirement}`.
    The check runs before the handler body, so a forbidden caller gets the same 403
    whether or not the target exists. Unknown actions are denied.
    """
    message = "You do not have permission to perform this action."

    def _infer_action(self, request, view) -> str | None:
        action = getattr(view, "action", None)
        if action:
            return action

        kwargs = getattr(view, "kwargs", {}) or {}
        is_detail = bool(kwargs)

        method = request.method.upper()
        if method in ("GET", "HEAD", "OPTIONS"):
            return "retrieve" if is_detail else "list"
        if method == "POST":
            return "create"
        if method == "PUT":
            return "update"
        if method == "PATCH":
            return "partial_update"
        if method == "DELETE":
            return "destroy"
        return None

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False

        action = self._infer_action(request, view)
        table = getattr(view, "required_roles_per_action", {}) or {}
        requirement = table.get(action)

        return bool(check_access(user_roles(user), requirement))

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)
