import os
import time

import redis
from django.core.cache import cache
from django.db import connections
from django.db.utils import OperationalError
from django.http import JsonResponse

from .logger import get_logger

logger = get_logger(__name__).bind(component="common", layer="health")

CACHE_PROBE_KEY = "health:probe"


def _redis_ping(url: str, timeout: float = 0.3):
    try:
        client = redis.from_url(url, socket_connect_timeout=timeout, socket_timeout=timeout)
        if client.ping():
            logger.debug("Redis ping succeeded")
            return {"status": "ok"}
        logger.warning("Redis ping returned a falsy response")
        return {"status": "fail"}
    except redis.RedisError as exc:
        logger.warning("Redis ping failed", error=str(exc))
        return {"status": "fail", "error": str(exc)}


def _db_check(alias="default"):
    started = time.monotonic()
    try:
        connections[alias].cursor().execute("SELECT 1")
    except OperationalError as exc:
        logger.warning("Database check failed", alias=alias, error=str(exc))
        return {"status": "fail", "error": str(exc)}
    except Exception as exc:
        logger.error(
            "Database check failed unexpectedly",
            alias=alias,
            error=str(exc),
            exception=exc.__class__.__name__,
        )
        return {"status": "fail", "error": str(exc), "exception": exc.__class__.__name__}
    latency = round((time.monotonic() - started) * 1000, 2)
    logger.debug("Database check succeeded", alias=alias, latency_ms=latency)
    return {"status": "ok", "latency_ms": latency}


def _cache_check():
    """Round-trip a probe value through the configured cache backend.

    The Redis backend is fail-open, so a dead Redis shows up here as a value
    that never comes back rather than as an exception.
    """
    token = str(time.monotonic())
    cache.set(CACHE_PROBE_KEY, token, timeout=5)
    if cache.get(CACHE_PROBE_KEY) == token:
        return {"status": "ok"}
    logger.warning("Cache round-trip lost the probe value")
    return {"status": "degraded", "detail": "cache is not retaining values"}


def live_health(request):
    """Liveness probe."""
    return JsonResponse({"status": "alive"})


def ready_health(request):
    """Readiness probe: database, cache and (when configured) Redis."""
    checks = {"database": _db_check(), "cache": _cache_check()}
    redis_url = os.getenv("REDIS_URL")
    if redis_url:
        checks["redis"] = _redis_ping(redis_url)
    else:
        checks["redis"] = {"status": "skipped", "detail": "REDIS_URL not set"}

    failing = [name for name, result in checks.items() if result.get("status") == "fail"]
    overall = "ok" if not failing else "degraded"
    logger.info("Readiness probe evaluated", status=overall, failing_components=failing)
    return JsonResponse(
        {"status": overall, "checks": checks}, status=200 if not failing else 503
    )
