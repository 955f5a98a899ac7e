# care_core/audit/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from care_core.audit.api.filters import AuditEntryFilter
from care_core.audit.api.serializers import AuditEntrySerializer
from care_core.audit.models import AuditEntry, TransactionType
from care_core.audit.selectors import list_audit_entries
from care_core.audit.services import AuditService
from care_core.common.context import context_from_request
from care_core.common.permissions import IsAuthenticatedOnly, RolePermission

DEFAULT_LIMIT = 200
MAX_LIMIT = 500


def _limit_from(request) -> int:
    raw = request.query_params.get("limit")
    try:
        n = int(raw) if raw else DEFAULT_LIMIT
    except (TypeError, ValueError):
        raise ValidationError({"limit": ["A valid integer is required."]})
    return max(1, min(n, MAX_LIMIT))


class AuditEntryViewSet(viewsets.GenericViewSet):
    """
    Compliance log. ADMIN sees every entry; anyone else sees entries they acted in or were the target of.
    """
    permission_classes = [RolePermission]
    required_roles_per_action = {
        "list": IsAuthenticatedOnly(),
    }

    serializer_class = AuditEntrySerializer
    queryset = AuditEntry.objects.none()

    @extend_schema(
        tags=["Audit"],
        responses={200: AuditEntrySerializer(many=True)},
        parameters=[
            OpenApiParameter(name="actor", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="target", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(
                name="transaction_type",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="e.g. HOSPITAL_CREATE, OPHTHALMOLOGY_SURGERY_EDIT",
            ),
            OpenApiParameter(name="start", type=OpenApiTypes.DATETIME, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="end", type=OpenApiTypes.DATETIME, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(
                name="limit",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Max records to return (default 200, max 500).",
            ),
        ],
    )
    def list(self, request):
        ctx = context_from_request(request)

        f = AuditEntryFilter(request.query_params, queryset=AuditEntry.objects.all())
        if not f.is_valid():
            raise ValidationError({k: [str(m) for m in v] for k, v in f.errors.items()})
        params = f.form.cleaned_data

        limit = _limit_from(request)

        qs = list_audit_entries(
            actor=params.get("actor") or None,
            target=params.get("target") or None,
            transaction_type=params.get("transaction_type") or None,
            start=params.get("start"),
            end=params.get("end"),
            involving=None if ctx.is_admin else ctx.actor,
        )
        data = AuditEntrySerializer(qs[:limit], many=True).data

        AuditService.record(
            transaction_type=TransactionType.AUDIT_VIEW,
            actor=ctx.actor,
            request_id=ctx.request_id,
        )
        return Response(data, status=status.HTTP_200_OK)
