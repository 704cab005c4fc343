import time
from typing import Any, Callable, Dict, Tuple

import structlog
from django.conf import settings
from django.core.cache import cache
from django.db import connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

logger = structlog.get_logger(__name__)

CACHE_PROBE_KEY = "printshop:health"


def _probe_database() -> None:
    with connections["default"].cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _probe_cache() -> None:
    cache.set(CACHE_PROBE_KEY, "ok", 10)
    if cache.get(CACHE_PROBE_KEY) != "ok":
        raise ConnectionError("cache read-back mismatch")


def _timed(name: str, probe: Callable[[], None]) -> Tuple[bool, Dict[str, Any]]:
    started = time.monotonic()
    try:
        probe()
    except Exception:
        logger.error("health_check.down", service=name, exc_info=True)
        return False, {"status": "down"}
    elapsed = round((time.monotonic() - started) * 1000, 2)
    return True, {"status": "up", "response_time_ms": elapsed}


def health_check(request: HttpRequest) -> JsonResponse:
    """Report database, cache and payment-gateway configuration status.

    The gateway is only checked for credentials, never called.
    """
    healthy = True
    services: Dict[str, Dict[str, Any]] = {}

    for name, probe in (("database", _probe_database), ("cache", _probe_cache)):
        ok, services[name] = _timed(name, probe)
        healthy = healthy and ok

    if settings.AUTHORIZE_NET_LOGIN_ID and settings.AUTHORIZE_NET_TRANSACTION_KEY:
        services["payment_gateway"] = {"status": "configured"}
    else:
        services["payment_gateway"] = {"status": "missing_credentials"}
        healthy = False
        logger.warning("health_check.gateway_unconfigured")

    return JsonResponse(
        {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if healthy else 503,
    )
