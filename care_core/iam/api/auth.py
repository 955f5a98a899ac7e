# care_core/iam/api/auth.py

from __future__ import annotations

from datetime import timedelta
from typing import Any

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer

from care_core.audit.models import TransactionType
from care_core.audit.services import AuditService
from care_core.common.context import context_from_request
from care_core.iam.api.schema_serializers import DetailResponseSerializer, LoginRequestSerializer


def _seconds(value: Any) -> int:
    """
    Convert a JWT lifetime setting into seconds.
    Supports timedelta OR int/float (already seconds).
    """
    if isinstance(value, timedelta):
        return int(value.total_seconds())
    try:
        return int(value)
    except (TypeError, ValueError):
        # 0 means "session cookie"
        return 0


def _set_auth_cookies(response: Response, *, access: str, refresh: str) -> None:
    jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}

    access_name = jwt_cfg.get("AUTH_COOKIE", "care_access")
    refresh_name = jwt_cfg.get("AUTH_COOKIE_REFRESH", "care_refresh")

    access_lifetime = _seconds(jwt_cfg.get("ACCESS_TOKEN_LIFETIME", timedelta(minutes=10)))
    refresh_lifetime = _seconds(jwt_cfg.get("REFRESH_TOKEN_LIFETIME", timedelta(days=14)))

    secure = bool(jwt_cfg.get("AUTH_COOKIE_SECURE", False))
    samesite = jwt_cfg.get("AUTH_COOKIE_SAMESITE", "Lax")

    for name, value, max_age in (
        (access_name, access, access_lifetime),
        (refresh_name, refresh, refresh_lifetime),
    ):
        response.set_cookie(
            name,
            value,
            max_age=max_age,
            httponly=True,
            secure=secure,
            samesite=samesite,
            path="/",
        )


def _clear_auth_cookies(response: Response) -> None:
    jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}
    response.delete_cookie(jwt_cfg.get("AUTH_COOKIE", "care_access"), path="/")
    response.delete_cookie(jwt_cfg.get("AUTH_COOKIE_REFRESH", "care_refresh"), path="/")


class PublicTokenView(APIView):
    """
    Token endpoints run without authentication; bad credentials still answer 401, not 403.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def get_authenticate_header(self, request):
        return 'Bearer realm="api"'


class LoginView(PublicTokenView):
    @extend_schema(request=LoginRequestSerializer, responses={200: DetailResponseSerializer}, tags=["IAM"])
    def post(self, request):
        username = str(request.data.get("username") or "")
        serializer = TokenObtainPairSerializer(data=request.data)
        try:
            serializer.is_valid(raise_exception=True)
        except AuthenticationFailed:
            AuditService.record(transaction_type=TransactionType.LOGIN_FAILURE, actor=username)
            raise

        access = serializer.validated_data["access"]
        refresh = serializer.validated_data["refresh"]

        AuditService.record(transaction_type=TransactionType.LOGIN_SUCCESS, actor=username)

        res = Response({"detail": "login ok", "access": access, "refresh": refresh}, status=status.HTTP_200_OK)
        _set_auth_cookies(res, access=access, refresh=refresh)
        return res


class RefreshView(PublicTokenView):
    @extend_schema(request=None, responses={200: DetailResponseSerializer}, tags=["IAM"])
    def post(self, request):
        jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}
        refresh_cookie_name = jwt_cfg.get("AUTH_COOKIE_REFRESH", "care_refresh")
        refresh = request.data.get("refresh") or request.COOKIES.get(refresh_cookie_name)

        serializer = TokenRefreshSerializer(data={"refresh": refresh})
        serializer.is_valid(raise_exception=True)

        access = serializer.validated_data["access"]
        new_refresh = serializer.validated_data.get("refresh", refresh)

        res = Response({"detail": "refreshed", "access": access}, status=status.HTTP_200_OK)
        _set_auth_cookies(res, access=access, refresh=new_refresh)
        return res


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: DetailResponseSerializer}, tags=["IAM"])
    def post(self, request):
        ctx = context_from_request(request)
        AuditService.record(transaction_type=TransactionType.LOGOUT, actor=ctx.actor, request_id=ctx.request_id)

        res = Response({"detail": "logged out"}, status=status.HTTP_200_OK)
        _clear_auth_cookies(res)
        return res
