from __future__ import annotations

import uuid

from core.tenancy.errors import TenantNotFound
from core.tenants.models import Tenant


def _lookup(tenant_id) -> dict:
    """
    Internal ids are integers, external ids are UUIDs.
    Anything else cannot name a tenant.
    """
    if isinstance(tenant_id, Tenant):
        return {"pk": tenant_id.pk}
    if isinstance(tenant_id, uuid.UUID):
        return {"uuid": tenant_id}
    if isinstance(tenant_id, bool) or tenant_id is None:
        raise TenantNotFound()
    if isinstance(tenant_id, int):
        return {"pk": tenant_id}

    raw = str(tenant_id).strip()
    # str.isdigit() also accepts non-ASCII digits such as "²"
    if raw.isascii() and raw.isdigit():
        return {"pk": int(raw)}
    try:
        return {"uuid": uuid.UUID(raw)}
    except ValueError:
        raise TenantNotFound()


def resolve(tenant_id) -> Tenant:
    lookup = _lookup(tenant_id)
    tenant = Tenant.objects.filter(**lookup).first()
    if tenant is None:
        raise TenantNotFound()
    return tenant
