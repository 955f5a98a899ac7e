# care_core/audit/selectors.py
from __future__ import annotations

from datetime import datetime

from django.db.models import Q, QuerySet

from care_core.audit.models import AuditEntry


def list_audit_entries(
    *,
    actor: str | None = None,
    target: str | None = None,
    transaction_type: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    involving: str | None = None,
) -> QuerySet[AuditEntry]:
    qs = AuditEntry.objects.all()

    if involving:
        qs = qs.filter(Q(actor=involving) | Q(target=involving))
    if actor:
        qs = qs.filter(actor=actor)
    if target:
        qs = qs.filter(target=target)
    if transaction_type:
        qs = qs.filter(transaction_type=transaction_type)
    if start:
        qs = qs.filter(occurred_at__gte=start)
    if end:
        qs = qs.filter(occurred_at__lte=end)

    return qs.order_by("-occurred_at", "-id")
