# care_core/common/context.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from care_core.common.permissions import Role, is_doctor, user_roles


@dataclass(frozen=True)
class RequestContext:
    """
    The authenticated principal for one operation.
    Built once per request and handed to every workflow/service call.
    """
    actor: str
    roles: FrozenSet[str] = field(default_factory=frozenset)
    user_id: Optional[int] = None
    request_id: Optional[str] = None

    @property
    def is_doctor(self) -> bool:
        return is_doctor(self.roles)

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles

    @property
    def is_patient_only(self) -> bool:
        """PATIENT without any clinical role; reads are narrowed to their own records."""
        return Role.PATIENT in self.roles and not self.is_doctor and not self.is_admin


SYSTEM_CONTEXT = RequestContext(actor="system", roles=frozenset({Role.ADMIN}))


def context_from_request(request) -> RequestContext:
    user = getattr(request, "user", None)
    if not user or not getattr(user, "is_authenticated", False):
        return RequestContext(actor="anonymous", request_id=getattr(request, "request_id", None))

    return RequestContext(
        actor=user.get_username(),
        roles=frozenset(user_roles(user)),
        user_id=user.pk,
        request_id=getattr(request, "request_id", None),
    )
