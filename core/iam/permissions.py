from rest_framework.permissions import BasePermission


class HasActiveTenant(BasePermission):
    """
    Requires:
      - request.active_tenant / request.active_membership (set by ActiveTenantMiddleware)
      - authenticated user
    Attaches:
      - request.tenant_role
    """

    message = "Select a tenant first"

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False

        membership = getattr(request, "active_membership", None)
        if membership is None or getattr(request, "active_tenant", None) is None:
            return False

        request.tenant_role = membership.role
        return True


class HasTenantRole(BasePermission):
    """
    Usage:
      permission_classes = [IsAuthenticated, HasActiveTenant, HasTenantRole.with_roles("admin")]
    """

    allowed_roles: tuple[str, ...] = tuple()

    @classmethod
    def with_roles(cls, *roles: str):
        return type("HasTenantRoleSub", (cls,), {"allowed_roles": roles})

    def has_permission(self, request, view):
        membership = getattr(request, "active_membership", None)
        return membership is not None and membership.role in self.allowed_roles


class HasTenantPermission(BasePermission):
    """All listed permissions are required; "*" on the membership grants everything."""

    required_permissions: tuple[str, ...] = tuple()

    @classmethod
    def with_permissions(cls, *perms: str):
        return type("HasTenantPermissionSub", (cls,), {"required_permissions": perms})

    def has_permission(self, request, view):
        membership = getattr(request, "active_membership", None)
        if membership is None:
            return False
        return all(membership.has_permission(p) for p in self.required_permissions)
