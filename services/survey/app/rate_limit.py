"""
Global slowapi rate limiter.

Every route gets the default per-IP limit through SlowAPIMiddleware (mounted
in main.py); ``/health`` is exempted there.

Storage: in-memory by default, which is enough for a single process.  Point
RATE_LIMIT_STORAGE_URI at a shared backend when running several workers.
"""
import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from app.config import get_settings

logger = logging.getLogger(__name__)

_settings = get_settings()

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[_settings.rate_limit],
    storage_uri=_settings.rate_limit_storage_uri,
    enabled=_settings.rate_limit_enabled,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 in the service's error envelope, with the wait time the client should honour."""
    retry_after = _settings.rate_limit_window_seconds
    if exc.limit is not None:
        retry_after = exc.limit.limit.get_expiry()
    logger.warning(
        "Rate limit exceeded for %s on %s %s",
        get_remote_address(request),
        request.method,
        request.url.path,
    )
    return JSONResponse(
        status_code=429,
        content={
            "error": "Too many requests from this IP, please try again later.",
            "retry_after": retry_after,
            "request_id": getattr(request.state, "request_id", None),
        },
        headers={"Retry-After": str(retry_after)},
    )
