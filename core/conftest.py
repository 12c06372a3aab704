import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from core.tenants.models import Tenant
from core.iam.models import TenantMembership
from core.tenancy.sessions import SessionStore

User = get_user_model()


@pytest.fixture
def user(db):
    return User.objects.create_user(username="alice", email="alice@example.com", password="pass12345")


@pytest.fixture
def other_user(db):
    return User.objects.create_user(username="bob", email="bob@example.com", password="pass12345")


# Names sort opposite to creation order so ordering assertions mean something.
@pytest.fixture
def tenant_a(db):
    return Tenant.objects.create(name="Zeta Corp", domain="zeta.example.com")


@pytest.fixture
def tenant_b(db):
    return Tenant.objects.create(name="Acme")


@pytest.fixture
def tenant_c(db):
    return Tenant.objects.create(name="Closed Co")


@pytest.fixture
def membership_a(db, user, tenant_a):
    return TenantMembership.objects.create(
        tenant=tenant_a, user=user, role=TenantMembership.Role.ADMIN, permissions=["*"]
    )


@pytest.fixture
def membership_b(db, user, tenant_b, membership_a):
    return TenantMembership.objects.create(
        tenant=tenant_b, user=user, role=TenantMembership.Role.MEMBER, permissions=["read", "write"]
    )


@pytest.fixture
def memberships(membership_a, membership_b, tenant_c):
    return membership_a, membership_b


@pytest.fixture
def session(db):
    s = SessionStore()
    s.create()
    return s


@pytest.fixture
def auth_client(user):
    client = APIClient()
    client.force_login(user)
    return client
