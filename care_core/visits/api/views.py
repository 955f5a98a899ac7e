# care_core/visits/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from care_core.common.api.pagination import paginate
from care_core.common.context import context_from_request
from care_core.common.permissions import HasAnyRole, HasRole, Role, RolePermission
from care_core.visits.forms import OfficeVisitSerializer, OphthalmologySurgerySerializer
from care_core.visits.models import OfficeVisit, OphthalmologySurgery
from care_core.visits.services import OfficeVisitService, OphthalmologySurgeryService

DOCTORS = (Role.HCP, Role.OD, Role.OPH)


class VisitViewSetMixin:
    """
    CRUD plus the two view markers, shared by office visits and surgeries.
    Subclasses set `service`, `serializer_class` and `required_roles_per_action`.
    """
    permission_classes = [RolePermission]
    lookup_field = "pk"
    lookup_value_regex = r"\d+"

    def list(self, request):
        qs = self.service.list(context_from_request(request))
        return paginate(request, qs, self.serializer_class)

    def retrieve(self, request, pk=None):
        visit = self.service.get(context_from_request(request), pk)
        return Response(self.serializer_class(visit).data, status=status.HTTP_200_OK)

    def create(self, request):
        visit = self.service.create(context_from_request(request), request.data)
        return Response(self.serializer_class(visit).data, status=status.HTTP_200_OK)

    def update(self, request, pk=None):
        visit = self.service.update(context_from_request(request), pk, request.data)
        return Response(self.serializer_class(visit).data, status=status.HTTP_200_OK)

    def destroy(self, request, pk=None):
        deleted = self.service.delete(context_from_request(request), pk)
        return Response(deleted, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"], url_path=r"hcp/view/(?P<visit_id>\d+)")
    def hcp_view(self, request, visit_id=None):
        self.service.record_hcp_view(context_from_request(request), visit_id)
        return Response(status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"], url_path=r"patient/view/(?P<visit_id>\d+)")
    def patient_view(self, request, visit_id=None):
        self.service.record_patient_view(context_from_request(request), visit_id)
        return Response(status=status.HTTP_200_OK)


@extend_schema(tags=["Office visits"])
class OfficeVisitViewSet(VisitViewSetMixin, viewsets.ViewSet):
    required_roles_per_action = {
        "list": HasAnyRole(*DOCTORS, Role.PATIENT),
        "retrieve": HasAnyRole(*DOCTORS, Role.PATIENT),
        "create": HasAnyRole(*DOCTORS),
        "update": HasAnyRole(*DOCTORS),
        "destroy": HasAnyRole(*DOCTORS),
        "hcp_view": HasAnyRole(*DOCTORS),
        "patient_view": HasRole(Role.PATIENT),
    }

    serializer_class = OfficeVisitSerializer
    queryset = OfficeVisit.objects.none()

    service = OfficeVisitService()


@extend_schema(tags=["Ophthalmology surgeries"])
class OphthalmologySurgeryViewSet(VisitViewSetMixin, viewsets.ViewSet):
    required_roles_per_action = {
        "list": HasAnyRole(*DOCTORS, Role.PATIENT),
        "retrieve": HasAnyRole(*DOCTORS, Role.PATIENT),
        "create": HasRole(Role.OPH),
        "update": HasRole(Role.OPH),
        "destroy": HasRole(Role.OPH),
        "hcp_view": HasRole(Role.OPH),
        "patient_view": HasRole(Role.PATIENT),
    }

    serializer_class = OphthalmologySurgerySerializer
    queryset = OphthalmologySurgery.objects.none()

    service = OphthalmologySurgeryService()
