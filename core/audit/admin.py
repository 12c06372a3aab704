from django.contrib import admin
from core.audit.models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("id", "tenant_id", "action", "actor_user_id", "entity_id", "created_at")
    list_filter = ("action", "created_at")
    search_fields = ("actor_user_id", "entity_id")
