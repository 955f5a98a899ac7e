# care_core/iam/api/me.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from care_core.common.context import context_from_request
from care_core.iam.api.schema_serializers import MeResponseSerializer


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: MeResponseSerializer}, tags=["IAM"])
    def get(self, request):
        ctx = context_from_request(request)
        return Response(
            {
                "user": {
                    "id": ctx.user_id,
                    "username": ctx.actor,
                    "roles": sorted(str(r) for r in ctx.roles),
                    "is_doctor": ctx.is_doctor,
                },
            },
            status=status.HTTP_200_OK,
        )
