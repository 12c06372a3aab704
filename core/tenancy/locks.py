from __future__ import annotations

import logging
import threading
import weakref
from contextlib import contextmanager

from django.conf import settings
from redis.exceptions import LockError

from core.common.redis_client import get_redis
from core.tenancy.errors import SessionBusy

logger = logging.getLogger(__name__)

LOCK_LOCAL = "local"
LOCK_REDIS = "redis"


class _SessionLock:
    __slots__ = ("lock", "__weakref__")

    def __init__(self):
        self.lock = threading.Lock()


_registry_guard = threading.Lock()
_registry: "weakref.WeakValueDictionary[str, _SessionLock]" = weakref.WeakValueDictionary()


def _local_lock_for(session_key: str) -> _SessionLock:
    with _registry_guard:
        entry = _registry.get(session_key)
        if entry is None:
            entry = _SessionLock()
            _registry[session_key] = entry
        return entry


def _timeout() -> float:
    return float(getattr(settings, "TENANT_SWITCH_LOCK_TIMEOUT", 5))


@contextmanager
def _local_session_lock(session_key: str):
    # hold a strong ref so the registry entry outlives the critical section
    entry = _local_lock_for(session_key)
    if not entry.lock.acquire(timeout=_timeout()):
        logger.error("tenant switch lock timeout (local) session=%s", session_key[:8])
        raise SessionBusy()
    try:
        yield
    finally:
        entry.lock.release()


@contextmanager
def _redis_session_lock(session_key: str):
    timeout = _timeout()
    lock = get_redis().lock(f"tenant-switch:{session_key}", timeout=timeout, blocking_timeout=timeout)
    if not lock.acquire():
        logger.error("tenant switch lock timeout (redis) session=%s", session_key[:8])
        raise SessionBusy()
    try:
        yield
    finally:
        try:
            lock.release()
        except LockError:
            # expired while held; the write already happened under it
            logger.warning("tenant switch lock expired before release session=%s", session_key[:8])


def session_lock(session_key: str):
    """
    Serializes writes to one session's tenant slice.

    Different session keys never contend. TENANT_SWITCH_LOCK picks between an
    in-process lock ("local") and a Redis lock shared by all workers ("redis").
    """
    backend = getattr(settings, "TENANT_SWITCH_LOCK", LOCK_LOCAL)
    if backend == LOCK_REDIS:
        return _redis_session_lock(session_key)
    if backend == LOCK_LOCAL:
        return _local_session_lock(session_key)
    raise ValueError(f"unknown TENANT_SWITCH_LOCK backend: {backend!r}")
