# care_core/patients/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.response import Response

from care_core.common.api.pagination import paginate
from care_core.common.context import context_from_request
from care_core.common.permissions import HasAnyRole, Role, RolePermission
from care_core.patients.forms import PatientForm, PatientSerializer
from care_core.patients.models import Patient
from care_core.patients.services import PatientService


class PatientViewSet(viewsets.ViewSet):
    """
    Patient demographics at /patients/{username}/.
    Clinicians, emergency responders and admins read; HCP/ADMIN maintain.
    A PATIENT may read and update their own record only.
    """
    permission_classes = [RolePermission]
    required_roles_per_action = {
        "list": HasAnyRole(Role.HCP, Role.OD, Role.OPH, Role.ER, Role.ADMIN, Role.PATIENT),
        "retrieve": HasAnyRole(Role.HCP, Role.OD, Role.OPH, Role.ER, Role.ADMIN, Role.PATIENT),
        "create": HasAnyRole(Role.HCP, Role.ADMIN),
        "update": HasAnyRole(Role.HCP, Role.ADMIN, Role.PATIENT),
        "destroy": HasAnyRole(Role.HCP, Role.ADMIN),
    }

    lookup_field = "username"
    lookup_value_regex = "[^/]+"

    serializer_class = PatientSerializer
    queryset = Patient.objects.none()

    service = PatientService()

    @extend_schema(tags=["Patients"], responses={200: PatientSerializer(many=True)})
    def list(self, request):
        qs = self.service.list(context_from_request(request))
        return paginate(request, qs, PatientSerializer)

    @extend_schema(tags=["Patients"], responses={200: PatientSerializer})
    def retrieve(self, request, username=None):
        patient = self.service.get(context_from_request(request), username)
        return Response(PatientSerializer(patient).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Patients"], request=PatientForm, responses={200: PatientSerializer})
    def create(self, request):
        patient = self.service.create(context_from_request(request), request.data)
        return Response(PatientSerializer(patient).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Patients"], request=PatientForm, responses={200: PatientSerializer})
    def update(self, request, username=None):
        patient = self.service.update(context_from_request(request), username, request.data)
        return Response(PatientSerializer(patient).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Patients"], responses={200: str})
    def destroy(self, request, username=None):
        deleted = self.service.delete(context_from_request(request), username)
        return Response(deleted, status=status.HTTP_200_OK)
