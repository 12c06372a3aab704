from django.contrib import admin
from django.contrib.auth.views import LogoutView
from django.urls import path, include
from django.shortcuts import redirect
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from core.common.views import health_check
from core.tenants.urls import v1_urlpatterns as tenants_v1_urlpatterns

urlpatterns = [
    path("", lambda request: redirect("tenant-selector")),

    path("admin/", admin.site.urls),

    # simple non-tenant health
    path("health/", health_check, name="health-check"),

    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    # login is the admin/session login; logout clears the tenant context via signal
    path("auth/logout", LogoutView.as_view(next_page="admin:login"), name="logout"),

    # tenant selection (not itself tenant-scoped)
    path("", include("core.tenants.urls")),

    # tenant-scoped API
    path("v1/", include(tenants_v1_urlpatterns)),
    path("v1/", include("core.audit.urls")),
]
