"""Rate limiting configuration (shared across routes and main app)."""

from slowapi import Limiter
from starlette.requests import Request


def _client_ip(request: Request) -> str:
    """Client IP, taken from X-Forwarded-For when behind a reverse proxy."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "127.0.0.1"


# /login overrides this with a stricter limit
limiter = Limiter(key_func=_client_ip, default_limits=["60/minute"])
