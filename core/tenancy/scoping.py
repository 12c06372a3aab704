from __future__ import annotations

from core.tenancy.errors import InvalidTenantState


def scope_to_tenant(queryset, tenant, field: str = "tenant"):
    """
    Restrict `queryset` to rows of `tenant`.

    `field` is the FK (or plain id column, e.g. "tenant_id") holding the
    tenant. Refuses to run unscoped.
    """
    if tenant is None:
        raise InvalidTenantState("no active tenant to scope by")
    value = tenant.pk if field.endswith("_id") else tenant
    return queryset.filter(**{field: value})
