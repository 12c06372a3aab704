"""
Database session store that keeps the active tenant consistent.

Django saves the session as one blob. A request that loaded the session
before a tenant switch and saves it afterwards (because it touched some
unrelated key) would write the old tenant back. Saves of such requests run
under the per-session lock and keep whatever tenant value is stored.

Only the switch itself (core.tenancy.context) writes the tenant value. It
already holds the lock and flags its store with `writes_tenant_slice`.

Use with SESSION_ENGINE = "core.tenancy.sessions".
"""
from __future__ import annotations

from django.contrib.sessions.backends.db import SessionStore as DBStore

from core.tenancy.context import session_key_name
from core.tenancy.locks import session_lock


class SessionStore(DBStore):
    writes_tenant_slice = False

    def save(self, must_create=False):
        if must_create or self.session_key is None or self.writes_tenant_slice:
            return super().save(must_create=must_create)

        with session_lock(self.session_key):
            self._keep_stored_tenant()
            return super().save(must_create=False)

    def _keep_stored_tenant(self) -> None:
        name = session_key_name()
        stored = self.__class__(session_key=self.session_key)
        value = stored.get(name)
        if stored.session_key is None:
            # nothing stored (expired or flushed); save as usual
            return

        # writes into the cache directly so `modified` is left alone
        if value is None:
            self._session.pop(name, None)
        else:
            self._session[name] = value
