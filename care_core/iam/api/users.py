# care_core/iam/api/users.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.response import Response

from care_core.common.api.pagination import paginate
from care_core.common.context import context_from_request
from care_core.common.permissions import HasRole, Role, RolePermission
from care_core.iam.forms import UserForm, UserSerializer
from care_core.iam.services import UserService


class UserViewSet(viewsets.ViewSet):
    """
    User administration, addressed by username. ADMIN only.
    """
    permission_classes = [RolePermission]
    required_roles_per_action = {
        "list": HasRole(Role.ADMIN),
        "retrieve": HasRole(Role.ADMIN),
        "create": HasRole(Role.ADMIN),
        "update": HasRole(Role.ADMIN),
        "destroy": HasRole(Role.ADMIN),
    }

    lookup_field = "username"
    lookup_value_regex = "[^/]+"

    serializer_class = UserSerializer
    queryset = get_user_model().objects.none()

    service = UserService()

    @extend_schema(tags=["Users"], responses={200: UserSerializer(many=True)})
    def list(self, request):
        qs = self.service.list(context_from_request(request)).prefetch_related("groups")
        return paginate(request, qs, UserSerializer)

    @extend_schema(tags=["Users"], responses={200: UserSerializer})
    def retrieve(self, request, username=None):
        user = self.service.get(context_from_request(request), username)
        return Response(UserSerializer(user).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Users"], request=UserForm, responses={200: UserSerializer})
    def create(self, request):
        user = self.service.create(context_from_request(request), request.data)
        return Response(UserSerializer(user).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Users"], request=UserForm, responses={200: UserSerializer})
    def update(self, request, username=None):
        user = self.service.update(context_from_request(request), username, request.data)
        return Response(UserSerializer(user).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Users"], responses={200: str})
    def destroy(self, request, username=None):
        deleted = self.service.delete(context_from_request(request), username)
        return Response(deleted, status=status.HTTP_200_OK)
