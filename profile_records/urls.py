"""
Project URL configuration.

Surfaces
--------
- `/admin/`: Django admin (back-office only).
- `/api/`: router-driven ViewSets for profiles and owned records.
- `/api/schema/`, `/api/docs/`, `/api/redoc/`: OpenAPI schema and UIs.
- `/health/`: unauthenticated readiness probe.

Record ids in routes may be `user=<email>`, so the router does not add format
suffix patterns (`.json` would otherwise be cut off an email's domain).
"""

from __future__ import annotations

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView, SpectacularSwaggerView
from rest_framework.routers import DefaultRouter

from core.views import health
from profiles.api import (
    EmergencyContactViewSet,
    GeneralInfoViewSet,
    IdentityDocumentViewSet,
    PersonViewSet,
    ProfileViewSet,
)


class RecordRouter(DefaultRouter):
    include_format_suffixes = False


router = RecordRouter()
router.register(r"profiles", ProfileViewSet, basename="profile")
router.register(r"persons", PersonViewSet, basename="person")
router.register(r"identity-documents", IdentityDocumentViewSet, basename="identity-document")
router.register(r"emergency-contacts", EmergencyContactViewSet, basename="emergency-contact")
router.register(r"general-infos", GeneralInfoViewSet, basename="general-info")

urlpatterns = [
    path("admin/", admin.site.urls),
    path("health/", health, name="health"),

    # OpenAPI / Docs
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),

    path("api/", include(router.urls)),
]
