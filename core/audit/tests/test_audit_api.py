import pytest

from core.audit.models import AuditLog


def switch(client, tenant_id):
    return client.post("/tenants/switch", {"tenant_id": tenant_id}, format="json")


@pytest.mark.django_db
def test_admin_sees_only_active_tenant_entries(auth_client, user, tenant_a, tenant_b, memberships):
    switch(auth_client, tenant_b.id)
    switch(auth_client, tenant_a.id)

    r = auth_client.get("/v1/audit/logs")
    assert r.status_code == 200
    items = r.json()["items"]
    assert len(items) == 1
    assert items[0]["action"] == "tenant.switched"
    assert items[0]["entity_id"] == str(tenant_a.id)
    assert items[0]["data"] == {"from_tenant_id": tenant_b.id}
    assert AuditLog.objects.filter(tenant_id=tenant_b.id).count() == 1


@pytest.mark.django_db
def test_member_role_cannot_read_audit_logs(auth_client, tenant_b, memberships):
    switch(auth_client, tenant_b.id)
    r = auth_client.get("/v1/audit/logs")
    assert r.status_code == 403
