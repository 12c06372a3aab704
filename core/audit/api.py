from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.audit.models import AuditLog
from core.iam.models import TenantMembership
from core.iam.permissions import HasActiveTenant, HasTenantRole
from core.tenancy.scoping import scope_to_tenant


@api_view(["GET"])
@permission_classes([IsAuthenticated, HasActiveTenant, HasTenantRole.with_roles(TenantMembership.Role.ADMIN)])
def audit_logs(request):
    qs = scope_to_tenant(AuditLog.objects.all(), request.active_tenant, field="tenant_id")
    qs = qs.order_by("-created_at", "-id")[:200]

    return Response({
        "items": [
            {
                "action": a.action,
                "entity_type": a.entity_type,
                "entity_id": a.entity_id,
                "actor_user_id": a.actor_user_id,
                "data": a.data_json,
                "created_at": a.created_at,
            }
            for a in qs
        ]
    })
