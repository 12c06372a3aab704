"""
Per-session active tenant.

The active tenant is a single value in the session under
settings.TENANT_SESSION_KEY:

    {"tenant_id": 12, "user_id": "7", "switched_at": "2026-01-01T10:00:00+00:00"}

It is written as one unit, under the per-session lock, into the stored
session so concurrent requests of the same session see either the old value
or the new one. Nothing else in the session is touched: a switch never logs
the user out or drops unrelated keys. Other saves of the session keep the
stored value (see core.tenancy.sessions).

Every read re-validates membership. A value that no longer holds (membership
revoked or suspended, tenant suspended or deleted, different user) is removed
and reported as "no tenant selected".
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from django.conf import settings
from django.utils import timezone

from core.audit.utils import audit
from core.iam.memberships import get_active_membership, has_active_membership, list_tenants_for_user
from core.tenancy.errors import InvalidTenantState, TenantForbidden
from core.tenancy.locks import session_lock
from core.tenants.directory import resolve as resolve_tenant

logger = logging.getLogger(__name__)

_ANY = object()


def session_key_name() -> str:
    return getattr(settings, "TENANT_SESSION_KEY", "active_tenant")


@dataclass(frozen=True)
class ActiveTenantContext:
    tenant_id: int
    user_id: str
    switched_at: str

    def as_session_value(self) -> dict:
        return asdict(self)

    @classmethod
    def from_session_value(cls, raw) -> "ActiveTenantContext | None":
        if not isinstance(raw, dict):
            return None
        try:
            return cls(
                tenant_id=int(raw["tenant_id"]),
                user_id=str(raw["user_id"]),
                switched_at=str(raw.get("switched_at", "")),
            )
        except (KeyError, TypeError, ValueError):
            return None


def _user_key(user) -> str | None:
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    return str(user.pk)


def _apply(session, value) -> None:
    if value is None:
        session.pop(session_key_name(), None)
    else:
        session[session_key_name()] = value


def _ensure_session_key(session) -> str:
    if not session.session_key:
        session.save()
    return session.session_key


def _swap(session, new_value, expected=_ANY):
    """
    Replace the tenant slice of the stored session.

    With `expected`, only replaces when the stored slice still equals it
    (compare-and-set). Returns (swapped, current_value). The request's own
    session object is brought in line with what was stored either way.
    """
    key = _ensure_session_key(session)
    name = session_key_name()

    with session_lock(key):
        stored = session.__class__(session_key=key)
        current = stored.get(name)
        if stored.session_key is None:
            # backend lost the session (expired/flushed); the request copy is all there is
            stored = session
            current = session.get(name)

        if expected is not _ANY and current != expected:
            _apply(session, current)
            return False, current

        _apply(stored, new_value)
        # already under the lock; the store must not merge the old slice back
        stored.writes_tenant_slice = True
        stored.save()

    if stored is not session:
        _apply(session, new_value)
    return True, new_value


def get_active_context(session) -> ActiveTenantContext | None:
    return ActiveTenantContext.from_session_value(session.get(session_key_name()))


def _validate(raw, user):
    ctx = ActiveTenantContext.from_session_value(raw)
    if ctx is None:
        raise InvalidTenantState("malformed tenant context")

    user_key = _user_key(user)
    if user_key is None or ctx.user_id != user_key:
        raise InvalidTenantState("tenant context belongs to another user", tenant_id=ctx.tenant_id)

    membership = get_active_membership(user.pk, ctx.tenant_id)
    if membership is None:
        raise InvalidTenantState("membership no longer active", tenant_id=ctx.tenant_id)
    return membership


def get_active_membership_for_session(session, user, _retry: bool = True):
    """
    Membership (with tenant) behind the session's active tenant, or None.

    Stale context is removed as a side effect; if another request switched
    the session meanwhile, the newer value is validated instead.
    """
    name = session_key_name()
    raw = session.get(name)
    if raw is None:
        return None

    try:
        return _validate(raw, user)
    except InvalidTenantState as exc:
        swapped, current = _swap(session, None, expected=raw)
        if swapped:
            logger.warning("cleared stale tenant context user=%s reason=%s", _user_key(user), exc.message)
            audit(
                tenant_id=exc.details.get("tenant_id"),
                action="tenant.context_invalidated",
                entity_type="tenant",
                entity_id=exc.details.get("tenant_id"),
                actor_user_id=_user_key(user),
                data={"reason": exc.message},
            )
            return None
        if current is not None and _retry:
            return get_active_membership_for_session(session, user, _retry=False)
        return None


def get_active_tenant(session, user):
    """
    Tenant bound to this session, or None when unset or no longer valid.
    """
    membership = get_active_membership_for_session(session, user)
    return membership.tenant if membership else None


def switch_tenant(session, user, requested_tenant_id):
    """
    Make `requested_tenant_id` the session's active tenant.

    Raises TenantNotFound for unknown tenants and TenantForbidden (a
    TenantNotFound) when the user has no active membership. On failure the
    session is left exactly as it was.
    """
    tenant = resolve_tenant(requested_tenant_id)

    user_key = _user_key(user)
    if user_key is None or not has_active_membership(user.pk, tenant.pk):
        logger.warning("tenant switch denied user=%s tenant=%s", user_key, tenant.pk)
        raise TenantForbidden()

    previous = get_active_context(session)
    ctx = ActiveTenantContext(tenant_id=tenant.pk, user_id=user_key, switched_at=timezone.now().isoformat())
    _swap(session, ctx.as_session_value())

    audit(
        tenant_id=tenant.pk,
        action="tenant.switched",
        entity_type="tenant",
        entity_id=tenant.pk,
        actor_user_id=user_key,
        data={"from_tenant_id": previous.tenant_id if previous else None},
    )
    logger.info("tenant switched user=%s tenant=%s", user_key, tenant.pk)
    return tenant


def clear_active_tenant(session) -> None:
    """Idempotent. Leaves everything else in the session alone."""
    if session_key_name() not in session and not session.session_key:
        return
    _swap(session, None)


def list_available_tenants(user, order_by: str = "joined"):
    """TenantAccess entries the user can switch into; empty for anonymous users."""
    if _user_key(user) is None:
        return []
    return list_tenants_for_user(user.pk, order_by=order_by)
