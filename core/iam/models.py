from django.conf import settings
from django.db import models
from core.tenants.models import Tenant


class TenantMembership(models.Model):
    WILDCARD = "*"

    class Role(models.TextChoices):
        ADMIN = "admin", "Admin"
        MEMBER = "member", "Member"

    id = models.BigAutoField(primary_key=True)
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name="memberships")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="tenant_memberships")
    # choices are the known roles; other values are allowed
    role = models.CharField(max_length=32, default=Role.MEMBER)
    permissions = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [models.UniqueConstraint(fields=["tenant", "user"], name="uq_membership_tenant_user")]
        indexes = [
            models.Index(fields=["tenant", "role"], name="iam_mbr_tenant_role_idx"),
            models.Index(fields=["user", "is_active"], name="iam_mbr_user_active_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id}@{self.tenant_id} ({self.role})"

    def permission_set(self) -> frozenset:
        return frozenset(self.permissions or [])

    def has_permission(self, perm: str) -> bool:
        perms = self.permission_set()
        return self.WILDCARD in perms or perm in perms
