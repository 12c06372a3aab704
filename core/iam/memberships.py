from __future__ import annotations

from dataclasses import dataclass

from core.iam.models import TenantMembership
from core.tenancy.errors import MembershipNotFound
from core.tenants.models import Tenant


ORDERINGS = {
    # membership creation order; id breaks ties within the same timestamp
    "joined": ("created_at", "id"),
    "name": ("tenant__name", "tenant_id"),
}


@dataclass(frozen=True)
class TenantAccess:
    tenant: Tenant
    role: str
    permissions: frozenset


def _active_memberships():
    return TenantMembership.objects.filter(is_active=True, tenant__status=Tenant.Status.ACTIVE)


def list_tenants_for_user(user_id, order_by: str = "joined") -> list[TenantAccess]:
    """
    Tenants the user can currently switch into, one entry per active membership.
    """
    try:
        ordering = ORDERINGS[order_by]
    except KeyError:
        raise ValueError(f"unknown ordering: {order_by!r}")

    qs = _active_memberships().filter(user_id=user_id).select_related("tenant").order_by(*ordering)
    return [TenantAccess(tenant=m.tenant, role=m.role, permissions=m.permission_set()) for m in qs]


def has_active_membership(user_id, tenant_id) -> bool:
    if user_id is None or tenant_id is None:
        return False
    return _active_memberships().filter(user_id=user_id, tenant_id=tenant_id).exists()


def get_active_membership(user_id, tenant_id) -> TenantMembership | None:
    if user_id is None or tenant_id is None:
        return None
    return _active_memberships().filter(user_id=user_id, tenant_id=tenant_id).select_related("tenant").first()


def get_membership(user_id, tenant_id) -> TenantMembership:
    """
    Returns the row regardless of is_active; callers decide what a suspended
    membership means for them.
    """
    m = TenantMembership.objects.filter(user_id=user_id, tenant_id=tenant_id).select_related("tenant").first()
    if m is None:
        raise MembershipNotFound()
    return m
