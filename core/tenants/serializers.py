from rest_framework import serializers
from core.tenants.models import Tenant


class TenantSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tenant
        fields = ["id", "uuid", "name", "domain"]
        read_only_fields = fields


class TenantAccessSerializer(serializers.Serializer):
    """Serializes core.iam.memberships.TenantAccess."""

    tenant = TenantSerializer()
    role = serializers.CharField()
    permissions = serializers.SerializerMethodField()

    def get_permissions(self, obj):
        return sorted(obj.permissions)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        tenant = data.pop("tenant")
        return {**tenant, **data}


class TenantSwitchSerializer(serializers.Serializer):
    # internal id or external uuid
    tenant_id = serializers.CharField(max_length=64, trim_whitespace=True)
