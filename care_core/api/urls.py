# care_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from care_core.audit.api.views import AuditEntryViewSet
from care_core.hospitals.api.views import HospitalViewSet
from care_core.iam.api.auth import LoginView, LogoutView, RefreshView
from care_core.iam.api.me import MeView
from care_core.iam.api.users import UserViewSet
from care_core.patients.api.views import PatientViewSet
from care_core.visits.api.views import OfficeVisitViewSet, OphthalmologySurgeryViewSet

router = DefaultRouter()

router.register(r"hospitals", HospitalViewSet, basename="hospitals")
router.register(r"users", UserViewSet, basename="users")
router.register(r"patients", PatientViewSet, basename="patients")
router.register(r"officevisits", OfficeVisitViewSet, basename="officevisits")
router.register(r"ophthalmologysurgeries", OphthalmologySurgeryViewSet, basename="ophthalmologysurgeries")
router.register(r"auditentries", AuditEntryViewSet, basename="auditentries")

urlpatterns = [
    # Auth + /me
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
