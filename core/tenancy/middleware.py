import logging

from django.conf import settings
from django.http import HttpResponseRedirect, JsonResponse
from django.shortcuts import resolve_url
from django.utils.http import urlencode

from core.tenancy.context import get_active_membership_for_session

logger = logging.getLogger(__name__)


def _error(code, message, status, **details):
    return JsonResponse({"error": {"code": code, "message": message, "details": details}}, status=status)


def _wants_json(request) -> bool:
    if request.path.startswith("/v1/"):
        return True
    accept = request.headers.get("Accept", "")
    return "application/json" in accept and "text/html" not in accept


def _header_matches(raw: str, tenant) -> bool:
    raw = raw.strip()
    return raw == str(tenant.uuid) or raw == str(tenant.pk)


class ActiveTenantMiddleware:
    """
    Must run after SessionMiddleware and AuthenticationMiddleware.

    - Resolves the session's active tenant (re-validated on every request)
      and attaches it as request.active_tenant / request.active_membership.
      These are request attributes only; nothing outlives the request.
    - Paths under TENANT_REQUIRED_PATH_PREFIXES need an active tenant:
      API clients get 409 TENANT_SELECTION_REQUIRED, browsers are sent to
      the tenant selector.
    - An X-Tenant-Id header is cross-checked against the session tenant on
      every authenticated request. A mismatch is logged everywhere and
      rejected on tenant-required paths. It never selects a tenant.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.active_tenant = None
        request.active_membership = None

        user = getattr(request, "user", None)
        authenticated = user is not None and user.is_authenticated
        if authenticated:
            membership = get_active_membership_for_session(request.session, user)
            if membership is not None:
                request.active_membership = membership
                request.active_tenant = membership.tenant

        required = self._requires_tenant(request.path or "/")
        mismatch = authenticated and self._header_mismatch(request, user)

        # authentication is enforced by the views
        if not required or not authenticated:
            return self.get_response(request)

        if request.active_tenant is None:
            return self._selection_required(request)

        if mismatch:
            return _error(
                "TENANT_MISMATCH",
                f"{settings.TENANT_HEADER} does not match the active tenant for this session",
                409,
            )

        return self.get_response(request)

    def _header_mismatch(self, request, user) -> bool:
        raw = request.headers.get(settings.TENANT_HEADER)
        if not raw or request.active_tenant is None:
            return False
        if _header_matches(raw, request.active_tenant):
            return False
        logger.warning(
            "tenant header mismatch user=%s session_tenant=%s header=%r path=%s",
            user.pk, request.active_tenant.pk, raw[:64], request.path,
        )
        return True

    def _requires_tenant(self, path: str) -> bool:
        if path.startswith(tuple(settings.TENANT_EXEMPT_PATH_PREFIXES)):
            return False
        return path.startswith(tuple(settings.TENANT_REQUIRED_PATH_PREFIXES))

    def _selection_required(self, request):
        select_url = resolve_url(settings.TENANT_SELECTION_URL)
        if _wants_json(request):
            return _error(
                "TENANT_SELECTION_REQUIRED",
                "Select a tenant before using this endpoint",
                409,
                select_url=select_url,
            )
        return HttpResponseRedirect(f"{select_url}?{urlencode({'next': request.get_full_path()})}")
