from slowapi import Limiter
from starlette.requests import Request

from ribaunt.config import settings


def get_client_key(request: Request) -> str:
    """Rate-limit key for a request.

    Behind a reverse proxy the original client is the first X-Forwarded-For
    entry. Only honored when RIBAUNT_TRUST_FORWARDED_FOR is set, since the
    header is client-controlled on direct connections.
    """
    if settings.trust_forwarded_for:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


limiter = Limiter(key_func=get_client_key)
