from core.audit.models import AuditLog


def audit(tenant_id, action, entity_type, entity_id, actor_user_id=None, data=None):
    return AuditLog.objects.create(
        tenant_id=tenant_id,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        actor_user_id=str(actor_user_id) if actor_user_id is not None else None,
        data_json=data or {},
    )
