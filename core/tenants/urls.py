from django.urls import path
from .api import tenant_me, tenant_selector, tenant_switch, tenants_available

urlpatterns = [
    path("tenants", tenant_selector, name="tenant-selector"),
    path("tenants/switch", tenant_switch, name="tenant-switch"),
    path("tenants/available", tenants_available, name="tenants-available"),
]

v1_urlpatterns = [
    path("tenants/me", tenant_me, name="tenant-me"),
]
