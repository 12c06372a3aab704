from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command

from core.iam.models import TenantMembership
from core.tenancy.context import switch_tenant
from core.tenancy.sessions import SessionStore
from core.tenants.models import Tenant

User = get_user_model()


def seed(*args):
    out = StringIO()
    call_command("seed_tenants", *args, stdout=out)
    return out.getvalue()


@pytest.mark.django_db
def test_seed_creates_default_tenant_and_accounts():
    out = seed()
    assert "Tenant seed complete" in out

    tenant = Tenant.objects.get(domain="localhost")
    assert tenant.name == "Default Tenant"
    assert tenant.is_active

    admin = TenantMembership.objects.get(tenant=tenant, user__email="admin@example.com")
    assert admin.role == "admin"
    assert admin.permissions == ["*"]
    assert admin.is_active

    member = TenantMembership.objects.get(tenant=tenant, user__email="user@example.com")
    assert member.role == "member"
    assert member.permissions == ["read", "write"]
    assert member.has_permission("write")
    assert not member.has_permission("delete")

    assert User.objects.get(username="admin").check_password("password")


@pytest.mark.django_db
def test_seed_is_safe_to_rerun():
    seed()
    tenant_uuid = Tenant.objects.get(domain="localhost").uuid
    admin = User.objects.get(username="admin")
    admin.set_password("changed")
    admin.save()

    seed("--password", "other")

    assert Tenant.objects.filter(domain="localhost").count() == 1
    assert Tenant.objects.get(domain="localhost").uuid == tenant_uuid
    assert User.objects.filter(username__in=["admin", "user"]).count() == 2
    assert TenantMembership.objects.count() == 2
    # existing passwords are left alone
    assert User.objects.get(username="admin").check_password("changed")


@pytest.mark.django_db
def test_seeded_users_can_switch_into_the_default_tenant():
    seed()
    tenant = Tenant.objects.get(domain="localhost")
    session = SessionStore()
    session.create()

    assert switch_tenant(session, User.objects.get(username="user"), tenant.id) == tenant
