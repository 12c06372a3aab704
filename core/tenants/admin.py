from django.contrib import admin
from core.tenants.models import Tenant


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "uuid", "domain", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("name", "domain", "uuid")
    readonly_fields = ("uuid", "created_at")
