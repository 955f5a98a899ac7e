# care_core/audit/services.py
from __future__ import annotations

import logging
from typing import Optional

from django.db import DatabaseError, transaction

from care_core.audit.models import AuditEntry

logger = logging.getLogger(__name__)


def _clip(field: str, value: Optional[str]) -> str:
    limit = AuditEntry._meta.get_field(field).max_length
    return (value or "")[:limit]


class AuditService:
    """
    Central audit writer.

    Called inside the caller's unit of work so the entry commits or rolls back with the
    change it describes. The insert runs in its own savepoint: if the audit table is
    unavailable the failure is logged for operators and the business transaction goes on.
    """

    @staticmethod
    def record(
        *,
        transaction_type: str,
        actor: str,
        target: Optional[str] = None,
        detail: str = "",
        request_id: Optional[str] = None,
    ) -> None:
        try:
            with transaction.atomic():
                AuditEntry.objects.create(
                    transaction_type=transaction_type,
                    actor=_clip("actor", actor),
                    target=_clip("target", target),
                    detail=detail or "",
                    request_id=_clip("request_id", request_id),
                )
        except DatabaseError:
            logger.exception(
                "Audit write failed: type=%s actor=%s target=%s",
                transaction_type,
                actor,
                target,
            )
            return

        logger.info("AUDIT %s actor=%s target=%s %s", transaction_type, actor, target or "-", detail)
