from django.contrib import messages
from django.http import HttpResponseRedirect
from django.shortcuts import resolve_url
from django.conf import settings
from django.utils.http import url_has_allowed_host_and_scheme
from rest_framework.decorators import api_view, permission_classes, renderer_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.renderers import JSONRenderer, TemplateHTMLRenderer
from rest_framework.response import Response

from core.iam.permissions import HasActiveTenant
from core.tenancy.context import list_available_tenants, switch_tenant
from core.tenancy.errors import TenancyError, TenantValidationError
from core.tenants.serializers import TenantAccessSerializer, TenantSerializer, TenantSwitchSerializer

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _selector_payload(request):
    tenants = list_available_tenants(request.user)
    current = getattr(request, "active_tenant", None)
    return {
        "tenants": TenantAccessSerializer(tenants, many=True).data,
        "currentTenant": TenantSerializer(current).data if current else None,
    }


def _error(exc: TenancyError):
    return Response(exc.as_payload(), status=exc.http_status)


def _is_form_post(request) -> bool:
    content_type = (request.content_type or "").split(";")[0].strip()
    return content_type in FORM_CONTENT_TYPES and "application/json" not in request.headers.get("Accept", "")


def _redirect_target(request) -> str:
    for candidate in (request.data.get("next"), request.headers.get("Referer")):
        if candidate and url_has_allowed_host_and_scheme(
            candidate, allowed_hosts={request.get_host()}, require_https=request.is_secure()
        ):
            return candidate
    return resolve_url(getattr(settings, "TENANT_SELECTION_URL", "tenant-selector"))


@api_view(["GET"])
@permission_classes([IsAuthenticated])
@renderer_classes([TemplateHTMLRenderer, JSONRenderer])
def tenant_selector(request):
    """
    GET /tenants
    HTML selector page, or {"tenants": [...], "currentTenant": ...} for JSON clients.
    """
    return Response(_selector_payload(request), template_name="tenants/selector.html")


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def tenants_available(request):
    """
    GET /tenants/available
    """
    return Response(_selector_payload(request))


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def tenant_switch(request):
    """
    POST /tenants/switch
    Body: { "tenant_id": <id or uuid> }

    Unknown tenant and tenant without membership both answer 404 NOT_FOUND.
    """
    s = TenantSwitchSerializer(data=request.data)
    if not s.is_valid():
        return _error(TenantValidationError("tenant_id is required", fields=s.errors))

    try:
        tenant = switch_tenant(request.session, request.user, s.validated_data["tenant_id"])
    except TenancyError as exc:
        if _is_form_post(request):
            messages.error(request, exc.message)
        return _error(exc)

    message = f"Switched to tenant: {tenant.name}"
    if _is_form_post(request):
        messages.success(request, message)
        return HttpResponseRedirect(_redirect_target(request))

    return Response({"tenant": TenantSerializer(tenant).data, "message": message})


@api_view(["GET"])
@permission_classes([IsAuthenticated, HasActiveTenant])
def tenant_me(request):
    """
    GET /v1/tenants/me
    The tenant this request is scoped to, as injected by ActiveTenantMiddleware.
    """
    tenant = request.active_tenant
    member = request.active_membership
    return Response({
        "tenant": {**TenantSerializer(tenant).data, "status": tenant.status},
        "membership": {"role": member.role, "permissions": sorted(member.permission_set())},
        "user": {"id": str(request.user.pk), "email": request.user.email},
    })
