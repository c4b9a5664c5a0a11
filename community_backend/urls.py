"""
URL configuration for the community events platform backend.
All API endpoints are registered under the `/api/` prefix.  Authentication
endpoints are nested under `/api/auth/` and direct messaging under
`/api/chat/`.
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView, SpectacularSwaggerView, SpectacularRedocView
)
from rest_framework.routers import DefaultRouter

from community_backend.views import health
from users.views import UserViewSet

router = DefaultRouter()
router.register(r"users", UserViewSet, basename="user")

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/health/", health, name="health"),

    #  Swagger/Redoc
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),

    path("api/auth/", include("users.urls")),
    path("api/chat/", include("messaging.urls")),
    path("api/", include("events.urls")),
    path("api/", include("groups.urls")),
    path("api/", include(router.urls)),
]

if settings.DEBUG:
    # Only serve MEDIA_URL via Django if it's a local path (avoid trying to serve S3)
    if getattr(settings, "MEDIA_URL", "").startswith("/"):
        urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
