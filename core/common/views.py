import logging

from django.conf import settings
from django.db import connection
from django.http import JsonResponse
from redis.exceptions import RedisError

from core.common.redis_client import get_redis

logger = logging.getLogger(__name__)


def health_check(request):
    status = {"db": False, "redis": False}

    # DB
    try:
        with connection.cursor() as c:
            c.execute("SELECT 1")
        status["db"] = True
    except Exception:
        logger.warning("health: database unreachable", exc_info=True)

    # Redis is only a dependency when it holds the switch locks
    if getattr(settings, "TENANT_SWITCH_LOCK", "local") == "redis":
        try:
            get_redis().ping()
            status["redis"] = True
        except RedisError:
            logger.warning("health: redis unreachable", exc_info=True)
    else:
        status.pop("redis")

    http_status = 200 if all(status.values()) else 503
    return JsonResponse(status, status=http_status)
