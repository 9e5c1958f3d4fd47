from django.conf import settings
from django.core.cache import cache
from django.http import HttpRequest

from .errors import RateLimitedError


def client_ip(request: HttpRequest) -> str | None:
    xff = (request.META.get("HTTP_X_FORWARDED_FOR") or "").strip()
    if xff:
        first = xff.split(",")[0].strip()
        if first:
            return first
    real_ip = (request.META.get("HTTP_X_REAL_IP") or "").strip()
    if real_ip:
        return real_ip
    remote_addr = (request.META.get("REMOTE_ADDR") or "").strip()
    return remote_addr or None


def hit(request: HttpRequest, scope: str) -> None:
    """Count one attempt for (scope, client ip); raise once the window is full."""
    limit = int(getattr(settings, "AUTH_RATE_LIMIT", 5))
    window = int(getattr(settings, "AUTH_RATE_WINDOW_SECONDS", 900))
    key = f"ratelimit:{scope}:{client_ip(request) or 'unknown'}"

    # add() ne fait rien si la clé existe : la fenêtre démarre au premier essai
    cache.add(key, 0, timeout=window)
    try:
        count = cache.incr(key)
    except ValueError:
        cache.set(key, 1, timeout=window)
        count = 1
    if count > limit:
        raise RateLimitedError()
