"""
Rate Limiting Service

Request rate limiting with slowapi, keyed by client IP.

Rate Limit Tiers:
=================
- Reads: settings.rate_limit_default (100 requests/minute)
- Writes: settings.rate_limit_write (30 requests/minute)

Counters are kept in process memory; each API instance limits on its
own. Set RATE_LIMIT_ENABLED=false to switch limiting off (tests do).
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from library_api.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


def get_client_ip(request: Request) -> str:
    """
    Get client IP address for rate limiting.

    Honors X-Forwarded-For and X-Real-IP set by a proxy, falling back to
    the direct connection address.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs; first is the client
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


def create_limiter() -> Limiter:
    limiter = Limiter(
        key_func=get_client_ip,
        default_limits=[settings.rate_limit_default],
        storage_uri="memory://",
        strategy="fixed-window",
        enabled=settings.rate_limit_enabled,
    )

    logger.info(
        f"Rate limiter initialized - enabled: {settings.rate_limit_enabled}, "
        f"default: {settings.rate_limit_default}, write: {settings.rate_limit_write}"
    )

    return limiter


limiter = create_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Turn RateLimitExceeded into a 429 JSON response with Retry-After.

    The body keeps the {"detail": ...} shape of every other error.
    """
    limit_detail = str(exc.detail)

    response = JSONResponse(
        status_code=429,
        content={"detail": f"Too many requests: {limit_detail}"},
    )
    response.headers["Retry-After"] = str(60)
    response.headers["X-RateLimit-Limit"] = limit_detail

    logger.warning(f"Rate limit exceeded for {get_client_ip(request)}: {limit_detail}")

    return response
