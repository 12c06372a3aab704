from __future__ import annotations

from django.contrib.auth.signals import user_logged_out
from django.dispatch import receiver

from core.tenancy.context import clear_active_tenant


@receiver(user_logged_out)
def on_user_logged_out(sender, request, user, **kwargs):
    session = getattr(request, "session", None)
    if session is not None:
        clear_active_tenant(session)
