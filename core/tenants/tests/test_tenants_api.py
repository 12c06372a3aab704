import pytest
from rest_framework.test import APIClient

from core.iam.models import TenantMembership

SESSION_KEY = "active_tenant"


def switch(client, tenant_id, **extra):
    return client.post("/tenants/switch", {"tenant_id": tenant_id}, format="json", **extra)


@pytest.mark.django_db
def test_tenant_endpoints_require_auth(tenant_a):
    client = APIClient()
    assert client.get("/tenants/available").status_code == 403
    assert switch(client, tenant_a.id).status_code == 403


@pytest.mark.django_db
def test_available_lists_memberships_in_creation_order(auth_client, tenant_a, tenant_b, memberships):
    r = auth_client.get("/tenants/available")
    assert r.status_code == 200
    body = r.json()
    assert [t["id"] for t in body["tenants"]] == [tenant_a.id, tenant_b.id]
    assert body["tenants"][0] == {
        "id": tenant_a.id,
        "uuid": str(tenant_a.uuid),
        "name": "Zeta Corp",
        "domain": "zeta.example.com",
        "role": "admin",
        "permissions": ["*"],
    }
    assert body["currentTenant"] is None


@pytest.mark.django_db
def test_switch_then_available_reports_current(auth_client, tenant_a, tenant_b, memberships):
    r = switch(auth_client, tenant_b.id)
    assert r.status_code == 200
    assert r.json()["message"] == "Switched to tenant: Acme"
    assert r.json()["tenant"]["uuid"] == str(tenant_b.uuid)
    assert auth_client.session[SESSION_KEY]["tenant_id"] == tenant_b.id

    body = auth_client.get("/tenants/available").json()
    assert len(body["tenants"]) == 2
    assert body["currentTenant"]["id"] == tenant_b.id


@pytest.mark.django_db
def test_switch_accepts_external_uuid(auth_client, tenant_a, memberships):
    r = switch(auth_client, str(tenant_a.uuid))
    assert r.status_code == 200
    assert auth_client.session[SESSION_KEY]["tenant_id"] == tenant_a.id


@pytest.mark.django_db
def test_unauthorized_and_missing_tenants_are_indistinguishable(auth_client, tenant_a, tenant_c, memberships):
    switch(auth_client, tenant_a.id)

    forbidden = switch(auth_client, tenant_c.id)
    missing = switch(auth_client, 999999)

    assert forbidden.status_code == missing.status_code == 404
    assert forbidden.json() == missing.json()
    assert forbidden.json()["error"]["code"] == "NOT_FOUND"

    # unchanged
    assert auth_client.session[SESSION_KEY]["tenant_id"] == tenant_a.id


@pytest.mark.django_db
@pytest.mark.parametrize("tenant_id", ["²", "not-a-tenant"])
def test_switch_to_malformed_id_is_not_found(auth_client, memberships, tenant_id):
    r = switch(auth_client, tenant_id)
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "NOT_FOUND"
    assert SESSION_KEY not in auth_client.session


@pytest.mark.django_db
def test_inactive_membership_cannot_be_switched_to(auth_client, tenant_b, memberships):
    _, membership_b = memberships
    membership_b.is_active = False
    membership_b.save(update_fields=["is_active"])

    assert switch(auth_client, tenant_b.id).status_code == 404


@pytest.mark.django_db
@pytest.mark.parametrize("payload", [{}, {"tenant_id": ""}, {"tenant_id": None}])
def test_switch_validation_error(auth_client, memberships, payload):
    r = auth_client.post("/tenants/switch", payload, format="json")
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.django_db
def test_switch_keeps_login_and_unrelated_session_data(auth_client, user, tenant_a, tenant_b, memberships):
    s = auth_client.session
    s["cart"] = {"items": 2}
    s.save()
    session_key = s.session_key

    switch(auth_client, tenant_a.id)
    switch(auth_client, tenant_b.id)

    s = auth_client.session
    assert s.session_key == session_key
    assert s["_auth_user_id"] == str(user.pk)
    assert s["cart"] == {"items": 2}
    assert auth_client.get("/tenants/available").status_code == 200


@pytest.mark.django_db
def test_form_switch_redirects_back(auth_client, tenant_a, memberships):
    r = auth_client.post("/tenants/switch", {"tenant_id": tenant_a.id, "next": "/v1/tenants/me"})
    assert r.status_code == 302
    assert r["Location"] == "/v1/tenants/me"
    assert auth_client.session[SESSION_KEY]["tenant_id"] == tenant_a.id


@pytest.mark.django_db
def test_form_switch_ignores_offsite_next(auth_client, tenant_a, memberships):
    r = auth_client.post("/tenants/switch", {"tenant_id": tenant_a.id, "next": "https://evil.example.com/"})
    assert r.status_code == 302
    assert r["Location"] == "/tenants"


@pytest.mark.django_db
def test_selector_page_renders_tenants(auth_client, tenant_a, tenant_b, memberships):
    switch(auth_client, tenant_a.id)

    r = auth_client.get("/tenants", HTTP_ACCEPT="text/html")
    assert r.status_code == 200
    html = r.content.decode()
    assert "Zeta Corp" in html
    assert "Acme" in html
    assert f'value="{tenant_a.id}" selected' in html


@pytest.mark.django_db
def test_selector_json(auth_client, tenant_a, tenant_b, memberships):
    r = auth_client.get("/tenants", HTTP_ACCEPT="application/json")
    assert r.status_code == 200
    body = r.json()
    assert [t["name"] for t in body["tenants"]] == ["Zeta Corp", "Acme"]
    assert body["currentTenant"] is None


@pytest.mark.django_db
def test_revoked_membership_drops_current_tenant(auth_client, tenant_a, memberships):
    membership_a, _ = memberships
    switch(auth_client, tenant_a.id)
    TenantMembership.objects.filter(id=membership_a.id).delete()

    body = auth_client.get("/tenants/available").json()
    assert body["currentTenant"] is None
    assert [t["name"] for t in body["tenants"]] == ["Acme"]
    assert SESSION_KEY not in auth_client.session
