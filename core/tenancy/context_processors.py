from functools import partial

from core.tenancy.context import list_available_tenants


def tenants(request):
    """
    Shares the selector data with every template.

    available_tenants is a callable so pages that never render the selector
    do not pay for the query.
    """
    user = getattr(request, "user", None)
    return {
        "active_tenant": getattr(request, "active_tenant", None),
        "available_tenants": partial(list_available_tenants, user),
    }
