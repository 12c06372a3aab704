"""
Errors raised while resolving, authorizing or switching the active tenant.

Each error carries the code/status used by the JSON error envelope
({"error": {"code", "message", "details"}}).
"""


class TenancyError(Exception):
    code = "TENANCY_ERROR"
    http_status = 400
    message = "Tenant context error"

    def __init__(self, message=None, **details):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details

    def as_payload(self) -> dict:
        return {"error": {"code": self.code, "message": self.message, "details": self.details}}


class TenantNotFound(TenancyError):
    """Raised when a referenced tenant does not exist."""

    code = "NOT_FOUND"
    http_status = 404
    message = "Tenant not found"


class TenantForbidden(TenantNotFound):
    """
    Tenant exists but the user has no active membership.

    Subclasses TenantNotFound so the HTTP boundary renders both the same way
    and callers cannot tell existing tenants from accessible ones.
    """

    def as_payload(self) -> dict:
        return {"error": {"code": TenantNotFound.code, "message": TenantNotFound.message, "details": {}}}


class MembershipNotFound(TenancyError):
    code = "NOT_FOUND"
    http_status = 404
    message = "Membership not found"


class InvalidTenantState(TenancyError):
    """Session points at a tenant the user may no longer use. Recovered by clearing the context."""

    code = "TENANT_SELECTION_REQUIRED"
    http_status = 409
    message = "Please select a tenant"


class TenantValidationError(TenancyError):
    code = "VALIDATION_ERROR"
    http_status = 400
    message = "Invalid tenant switch request"


class SessionBusy(TenancyError):
    """Could not acquire the per-session switch lock in time."""

    code = "SESSION_BUSY"
    http_status = 409
    message = "Another tenant switch is in progress for this session"
