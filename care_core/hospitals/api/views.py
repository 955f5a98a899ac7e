# care_core/hospitals/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.response import Response

from care_core.common.api.pagination import paginate
from care_core.common.context import context_from_request
from care_core.common.permissions import HasRole, IsAuthenticatedOnly, Role, RolePermission
from care_core.hospitals.forms import HospitalForm, HospitalSerializer
from care_core.hospitals.models import Hospital
from care_core.hospitals.services import HospitalService


class HospitalViewSet(viewsets.ViewSet):
    """
    Hospitals are addressed by name: /hospitals/{name}/.
    Anyone signed in can read; only ADMIN can change them.
    """
    permission_classes = [RolePermission]
    required_roles_per_action = {
        "list": IsAuthenticatedOnly(),
        "retrieve": IsAuthenticatedOnly(),
        "create": HasRole(Role.ADMIN),
        "update": HasRole(Role.ADMIN),
        "destroy": HasRole(Role.ADMIN),
    }

    lookup_field = "name"
    lookup_value_regex = "[^/]+"

    serializer_class = HospitalSerializer
    queryset = Hospital.objects.none()

    service = HospitalService()

    @extend_schema(tags=["Hospitals"], responses={200: HospitalSerializer(many=True)})
    def list(self, request):
        qs = self.service.list(context_from_request(request))
        return paginate(request, qs, HospitalSerializer)

    @extend_schema(tags=["Hospitals"], responses={200: HospitalSerializer})
    def retrieve(self, request, name=None):
        hospital = self.service.get(context_from_request(request), name)
        return Response(HospitalSerializer(hospital).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Hospitals"], request=HospitalForm, responses={200: HospitalSerializer})
    def create(self, request):
        hospital = self.service.create(context_from_request(request), request.data)
        return Response(HospitalSerializer(hospital).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Hospitals"], request=HospitalForm, responses={200: HospitalSerializer})
    def update(self, request, name=None):
        hospital = self.service.update(context_from_request(request), name, request.data)
        return Response(HospitalSerializer(hospital).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Hospitals"], responses={200: str})
    def destroy(self, request, name=None):
        deleted = self.service.delete(context_from_request(request), name)
        return Response(deleted, status=status.HTTP_200_OK)
